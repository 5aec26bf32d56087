# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0", "anthropic>=0.78.0"]
# ///
"""Tests for AI game report generation.

Validates:
  1. Input validation: empty, too large and invalid JSON
  2. The system prompt carries the language hint for each locale
  3. The scorecard and notes are wrapped in tagged sections
  4. The Messages API call uses the configured model and temperature 0.3
  5. 429 responses are retried with backoff, honoring Retry-After
  6. Other upstream failures map to ReportUpstreamError (502)
  7. Empty model output falls back to a fixed message
  8. A missing API key raises MissingApiKeyError (500)
"""

import json
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

import report
from report import (
    CLAUDE_MAX_RETRIES,
    EMPTY_REPORT_TEXT,
    MAX_SCORECARD_BYTES,
    MissingApiKeyError,
    ReportInputError,
    ReportTooLargeError,
    ReportUpstreamError,
    build_system_prompt,
    build_user_message,
    generate_report,
    generate_scorecard_report,
    validate_scorecard_json,
)
from scorecard import TeamScorecard

DOC = json.dumps({"teamName": "Bay Bears", "players": [], "grid": [], "innings": [1]})


def _message(*texts):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


class _RateLimited(Exception):
    def __init__(self, retry_after=None):
        super().__init__("rate limited")
        self.status_code = 429
        headers = {"retry-after": retry_after} if retry_after is not None else {}
        self.response = SimpleNamespace(headers=headers, status_code=429)


class _ServerError(Exception):
    status_code = 500


@pytest.fixture
def client():
    c = MagicMock()
    c.messages.create.return_value = _message("## Report\n", "Solid game.  ")
    return c


class TestValidation:
    @pytest.mark.parametrize("value", [None, "", "   ", 12])
    def test_missing(self, value):
        with pytest.raises(ReportInputError) as exc:
            validate_scorecard_json(value)
        assert exc.value.status_code == 400

    def test_invalid_json(self):
        with pytest.raises(ReportInputError):
            validate_scorecard_json("{oops")

    def test_too_large(self):
        big = json.dumps({"pad": "x" * MAX_SCORECARD_BYTES})
        with pytest.raises(ReportTooLargeError) as exc:
            validate_scorecard_json(big)
        assert exc.value.status_code == 413

    def test_valid(self):
        assert validate_scorecard_json(DOC) == DOC


class TestPrompts:
    def test_english(self):
        prompt = build_system_prompt("en")
        assert prompt.startswith("You are a meticulous baseball analyst.")
        assert "(R, AB, H, RBI, BB, K)" in prompt
        assert prompt.endswith("Write the entire report in clear, concise English.")

    def test_chinese(self):
        assert "简体中文" in build_system_prompt("zh")

    def test_unknown_locale_falls_back(self):
        assert build_system_prompt("fr") == build_system_prompt("en")

    def test_user_message(self):
        msg = build_user_message('{"a": 1}', "Rain delay")
        assert msg == '<scorecard-json>\n{"a": 1}\n</scorecard-json>\n\n<extra-notes>\nRain delay\n</extra-notes>'


class TestGenerate:
    def test_success(self, client, monkeypatch):
        monkeypatch.setenv("SCORECARD_REPORT_MODEL", "test-model")
        text = generate_report(DOC, notes="Home opener", locale="zh", client=client)
        assert text == "## Report\nSolid game."
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.3
        assert "简体中文" in kwargs["system"]
        assert kwargs["messages"][0]["role"] == "user"
        assert "Home opener" in kwargs["messages"][0]["content"]

    def test_empty_output(self, client):
        client.messages.create.return_value = _message("   ")
        assert generate_report(DOC, client=client) == EMPTY_REPORT_TEXT

    def test_non_text_blocks_ignored(self, client):
        client.messages.create.return_value = SimpleNamespace(content=[SimpleNamespace(type="tool_use")])
        assert generate_report(DOC, client=client) == EMPTY_REPORT_TEXT

    def test_bad_input_skips_api(self, client):
        with pytest.raises(ReportInputError):
            generate_report("", client=client)
        client.messages.create.assert_not_called()

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(MissingApiKeyError) as exc:
            generate_report(DOC)
        assert exc.value.status_code == 500

    def test_scorecard_report(self, client):
        text = generate_scorecard_report(TeamScorecard(team_name="Bay Bears"), client=client)
        assert text.startswith("## Report")
        assert '"teamName": "Bay Bears"' in client.messages.create.call_args.kwargs["messages"][0]["content"]


class TestRetries:
    def test_retries_on_429(self, client):
        client.messages.create.side_effect = [_RateLimited(), _RateLimited(), _message("ok")]
        with patch("report.time.sleep") as mock_sleep:
            assert generate_report(DOC, client=client) == "ok"
        assert client.messages.create.call_count == 3
        assert mock_sleep.call_count == 2

    def test_respects_retry_after(self, client):
        client.messages.create.side_effect = [_RateLimited(retry_after="60"), _message("ok")]
        with patch("report.time.sleep") as mock_sleep:
            generate_report(DOC, client=client)
        assert mock_sleep.call_args.args[0] >= 60.0

    def test_gives_up_after_max_retries(self, client):
        client.messages.create.side_effect = _RateLimited()
        with patch("report.time.sleep"):
            with pytest.raises(ReportUpstreamError) as exc:
                generate_report(DOC, client=client)
        assert exc.value.status_code == 502
        assert client.messages.create.call_count == CLAUDE_MAX_RETRIES

    def test_other_errors_not_retried(self, client):
        client.messages.create.side_effect = _ServerError("boom")
        with patch("report.time.sleep") as mock_sleep:
            with pytest.raises(ReportUpstreamError):
                generate_report(DOC, client=client)
        assert client.messages.create.call_count == 1
        mock_sleep.assert_not_called()

    def test_backoff_grows(self):
        with patch("report.time.sleep") as mock_sleep, patch("report.random.random", return_value=0.0):
            report._claude_backoff_sleep(0)
            report._claude_backoff_sleep(2)
        delays = [c.args[0] for c in mock_sleep.call_args_list]
        assert delays == [report.CLAUDE_BACKOFF_BASE, report.CLAUDE_BACKOFF_BASE * 4]
