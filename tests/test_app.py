# /// script
# requires-python = ">=3.12"
# dependencies = ["flask>=3.0", "pytest>=7.0", "pydantic>=2.0", "anthropic>=0.78.0"]
# ///
"""Tests for the scorecard JSON API.

Validates:
  1. Team state includes the grid, outs, locks, stats and arming
  2. Cell intents and diamond clicks are applied and persisted
  3. Invalid intents return 400; rejected edits return 409
  4. Out recording and resets
  5. Key presses arm the next click
  6. Lineup add/remove
  7. Export download headers
  8. /api/analyze maps report errors to HTTP statuses
"""

import json
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

import app as app_module
from app import app
from data.store import JsonStore, team_key
from report import ReportTooLargeError, ReportUpstreamError
from scorecard import ScorekeeperSession


class FakeClock:
    def __init__(self):
        self.now = 50.0

    def __call__(self):
        return self.now


@pytest.fixture
def store(tmp_path):
    return JsonStore(root_dir=tmp_path / "store")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(store, clock, monkeypatch):
    monkeypatch.setattr(app_module, "_session", ScorekeeperSession(store, clock=clock))
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def _strikeout(client, row, col=0, team="home"):
    return client.post(
        f"/api/teams/{team}/cells/{row}/{col}",
        json={"action": "set_pitches", "sequence": ["SS", "SS", "SS"]},
    )


# -----------------------------------------------------------------------
# Team state
# -----------------------------------------------------------------------


class TestTeamState:
    def test_get_home(self, client):
        resp = client.get("/api/teams/home")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["team"] == "home"
        assert data["teamName"] == "Home Team"
        assert len(data["grid"]) == 9
        assert data["inningOuts"] == [0] * 9
        assert data["locked"][0] == [False] * 9
        assert data["totals"] == {"R": 0, "H": 0, "BB": 0, "K": 0}
        assert data["arming"] == {"cause": None, "award": None}

    def test_switch_to_away(self, client):
        data = client.get("/api/teams/away").get_json()
        assert data["team"] == "away"
        assert data["teamName"] == "Away Team"

    def test_unknown_team(self, client):
        assert client.get("/api/teams/visitors").status_code == 404


# -----------------------------------------------------------------------
# Cells
# -----------------------------------------------------------------------


class TestCells:
    def test_select_outcome(self, client, store):
        resp = client.post("/api/teams/home/cells/0/0", json={"action": "select_outcome", "outcome": "HR"})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["applied"] is True
        assert data["grid"][0][0]["baseReached"] == 4
        assert data["inningRuns"][0] == 1
        assert data["batting"][0]["RBI"] == 1
        assert store.load(team_key("home", "grid"))[0][0]["outcome"] == "HR"

    def test_strikeout_records_out(self, client):
        data = _strikeout(client, 0).get_json()
        assert data["grid"][0][0]["outcome"] == "K"
        assert data["inningOuts"][0] == 1
        assert data["outsInEffect"][0][0] == 1

    def test_append_pitches_to_strikeout(self, client):
        for _ in range(3):
            resp = client.post("/api/teams/home/cells/0/0", json={"action": "append_pitch", "mark": "SS"})
            assert resp.status_code == 200
        data = resp.get_json()
        assert data["grid"][0][0]["pitchSequence"] == ["SS", "SS", "SS"]
        assert data["grid"][0][0]["outcome"] == "K"
        assert data["inningOuts"][0] == 1

    def test_swap_pitches(self, client):
        client.post("/api/teams/home/cells/0/0", json={"action": "set_pitches", "sequence": ["B", "CS"]})
        data = client.post("/api/teams/home/cells/0/0", json={"action": "swap_pitches", "a": 0, "b": 1}).get_json()
        assert data["grid"][0][0]["pitchSequence"] == ["CS", "B"]

    def test_invalid_intent(self, client):
        resp = client.post("/api/teams/home/cells/0/0", json={"action": "select_outcome", "outcome": "5B"})
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_missing_action(self, client):
        assert client.post("/api/teams/home/cells/0/0", json={}).status_code == 400

    def test_locked_cell_rejected(self, client):
        for row in range(3):
            _strikeout(client, row)
        resp = client.post("/api/teams/home/cells/3/0", json={"action": "select_outcome", "outcome": "1B"})
        assert resp.status_code == 409
        data = resp.get_json()
        assert data["applied"] is False
        assert data["locked"][3][0] is True

    def test_notes_on_locked_cell(self, client):
        for row in range(3):
            _strikeout(client, row)
        resp = client.post("/api/teams/home/cells/3/0", json={"action": "edit_notes", "notes": "PH"})
        assert resp.status_code == 200

    def test_diamond_clicks_merge(self, client, clock):
        client.post("/api/teams/home/cells/0/0", json={"action": "diamond_click"})
        clock.now += 0.1
        data = client.post("/api/teams/home/cells/0/0", json={"action": "diamond_click"}).get_json()
        path = data["grid"][0][0]["runPath"]
        assert len(path) == 1
        assert (path[0]["from"], path[0]["to"], path[0]["kind"]) == (0, 2, "advance")

    def test_ctrl_click_is_hit(self, client):
        data = client.post("/api/teams/home/cells/1/0", json={"action": "diamond_click", "ctrl": True}).get_json()
        assert data["grid"][1][0]["outcome"] == "1B"

    def test_armed_click(self, client):
        resp = client.post("/api/teams/home/keys", json={"key": "b"})
        assert resp.get_json() == {"handled": True, "arming": {"cause": None, "award": "Walk"}}
        data = client.post("/api/teams/home/cells/2/0", json={"action": "diamond_click"}).get_json()
        assert data["grid"][2][0]["outcome"] == "Walk"
        assert data["arming"] == {"cause": None, "award": None}

    def test_unhandled_key(self, client):
        assert client.post("/api/teams/home/keys", json={"key": "q"}).get_json()["handled"] is False

    def test_key_body_not_an_object(self, client):
        resp = client.post("/api/teams/home/keys", json=["3"])
        assert resp.status_code == 200
        assert resp.get_json() == {"handled": False, "arming": {"cause": None, "award": None}}


# -----------------------------------------------------------------------
# Outs
# -----------------------------------------------------------------------


class TestOuts:
    def test_record_out(self, client):
        data = client.post("/api/teams/home/outs/0/4").get_json()
        assert data["inningOuts"][0] == 1
        assert data["grid"][4][0]["outsRecorded"] == 1

    def test_reset_from_row(self, client):
        for row in range(3):
            _strikeout(client, row)
        data = client.post("/api/teams/home/outs/0/1/reset").get_json()
        assert data["inningOuts"][0] == 1

    def test_reset_inning(self, client):
        _strikeout(client, 0)
        data = client.post("/api/teams/home/innings/0/reset").get_json()
        assert data["inningOuts"][0] == 0

    def test_record_out_outside_grid(self, client):
        assert client.post("/api/teams/home/outs/20/0").status_code == 409


# -----------------------------------------------------------------------
# Players and export
# -----------------------------------------------------------------------


class TestPlayers:
    def test_add_named_player(self, client):
        data = client.post("/api/teams/home/players", json={"name": "Ada", "number": 12}).get_json()
        assert data["players"][-1] == {"name": "Ada", "number": "12"}
        assert len(data["grid"]) == 10

    def test_add_default_player(self, client):
        data = client.post("/api/teams/home/players").get_json()
        assert data["players"][-1]["name"] == "Player 10"

    def test_remove_player(self, client):
        data = client.delete("/api/teams/home/players").get_json()
        assert len(data["players"]) == 8


class TestExport:
    def test_download(self, client):
        client.post("/api/teams/away/cells/0/0", json={"action": "select_outcome", "outcome": "2B"})
        resp = client.get("/api/teams/away/export")
        assert resp.status_code == 200
        assert 'filename="Away_Team_scorecard.json"' in resp.headers["Content-Disposition"]
        doc = json.loads(resp.data)
        assert doc["teamName"] == "Away Team"
        assert doc["innings"] == list(range(1, 10))
        assert doc["grid"][0][0]["outcome"] == "2B"


# -----------------------------------------------------------------------
# Report
# -----------------------------------------------------------------------


class TestAnalyze:
    def test_success(self, client):
        with patch("app.generate_report", return_value="## Great game") as mock_gen:
            resp = client.post("/api/analyze", json={"jsonText": "{}", "notes": "n", "locale": "zh"})
        assert resp.status_code == 200
        assert resp.get_json() == {"report": "## Great game"}
        mock_gen.assert_called_once_with("{}", notes="n", locale="zh")

    def test_missing_json_text(self, client, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
        resp = client.post("/api/analyze", json={})
        assert resp.status_code == 400
        assert resp.get_json()["error"]

    def test_missing_key(self, client, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        resp = client.post("/api/analyze", json={"jsonText": "{}"})
        assert resp.status_code == 500

    @pytest.mark.parametrize("error,status", [
        (ReportTooLargeError("JSON is too large"), 413),
        (ReportUpstreamError("Claude API error: boom"), 502),
    ])
    def test_error_statuses(self, client, error, status):
        with patch("app.generate_report", side_effect=error):
            resp = client.post("/api/analyze", json={"jsonText": "{}"})
        assert resp.status_code == status
        assert resp.get_json() == {"error": str(error)}
