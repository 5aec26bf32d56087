# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "anthropic>=0.78.0",
#     "pydantic>=2.0",
# ]
# ///
"""Game report generation.

Sends an exported scorecard (plus optional free-text notes) to Claude and
returns a short markdown game report. The scorecard core never depends on
the report: it is treated as opaque text.

Usage::

    from report import generate_report

    text = generate_report(json_text, notes="Rain delay in the 6th", locale="zh")

Failures raise a :class:`ReportError` subclass whose ``status_code`` is the
HTTP status the web API answers with.
"""

from __future__ import annotations

import json
import logging
import random
import time
from enum import Enum
from typing import Optional

from anthropic import Anthropic

from config import create_anthropic_client, get_api_key, get_report_model

logger = logging.getLogger(__name__)

MAX_SCORECARD_BYTES = 2_000_000
REPORT_TEMPERATURE = 0.3
REPORT_MAX_TOKENS = 2048
EMPTY_REPORT_TEXT = "No content returned by the model."

# ---------------------------------------------------------------------------
# Claude API rate limit constants
# ---------------------------------------------------------------------------

CLAUDE_MAX_RETRIES = 5
CLAUDE_BACKOFF_BASE = 2.0  # seconds; actual delay = base * 2^attempt + jitter


class ReportLocale(str, Enum):
    EN = "en"
    ZH = "zh"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ReportError(Exception):
    """Base class for report failures."""
    status_code = 500


class MissingApiKeyError(ReportError):
    status_code = 500


class ReportInputError(ReportError):
    status_code = 400


class ReportTooLargeError(ReportError):
    status_code = 413


class ReportUpstreamError(ReportError):
    status_code = 502


# ---------------------------------------------------------------------------
# Prompt construction
# ---------------------------------------------------------------------------

_LANGUAGE_HINTS = {
    ReportLocale.EN: "Write the entire report in clear, concise English.",
    ReportLocale.ZH: "你必须使用简体中文撰写整份报告，避免中英文混杂。",
}


def build_system_prompt(locale: ReportLocale | str = ReportLocale.EN) -> str:
    try:
        hint = _LANGUAGE_HINTS[ReportLocale(locale)]
    except ValueError:
        hint = _LANGUAGE_HINTS[ReportLocale.EN]
    return " ".join([
        "You are a meticulous baseball analyst.",
        "Given a single-game scorecard JSON, produce a concise, insightful markdown report.",
        "Include: team overview, inning-by-inning scoring, standout players, basic per-batter "
        "stats if derivable (R, AB, H, RBI, BB, K), and notable moments.",
        "If some stats are not present or derivable, say so briefly; do not invent data.",
        "Use short sections with headers and bullet points where helpful.",
        hint,
    ])


def build_user_message(json_text: str, notes: str = "") -> str:
    return "\n".join([
        "<scorecard-json>",
        json_text,
        "</scorecard-json>",
        "",
        "<extra-notes>",
        notes or "",
        "</extra-notes>",
    ])


def validate_scorecard_json(json_text: object) -> str:
    """Check the document before spending an API call on it.

    Raises:
        ReportInputError: Missing, empty, or invalid JSON.
        ReportTooLargeError: Larger than ``MAX_SCORECARD_BYTES``.
    """
    if not isinstance(json_text, str) or not json_text.strip():
        raise ReportInputError("Missing or empty jsonText")
    if len(json_text.encode("utf-8")) > MAX_SCORECARD_BYTES:
        raise ReportTooLargeError("JSON is too large")
    try:
        json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise ReportInputError("Invalid JSON provided.") from exc
    return json_text


# ---------------------------------------------------------------------------
# Rate-limit handling
# ---------------------------------------------------------------------------

def _claude_backoff_sleep(attempt: int, retry_after: float | None = None) -> None:
    """Sleep with exponential backoff and jitter for Claude API retries."""
    base_delay = CLAUDE_BACKOFF_BASE * (2 ** attempt)
    jitter = random.random() * base_delay
    delay = base_delay + jitter
    if retry_after is not None and retry_after > delay:
        delay = retry_after
    time.sleep(delay)


def _extract_retry_after(exc: Exception) -> float | None:
    """Read ``retry-after`` / ``x-retry-after`` from an API error's response headers."""
    response = getattr(exc, "response", None)
    if response is None:
        return None
    headers = getattr(response, "headers", None)
    if headers is None:
        return None
    for key in ("retry-after", "x-retry-after"):
        val = headers.get(key)
        if val is not None:
            try:
                return max(0.0, float(val))
            except (TypeError, ValueError):
                pass
    return None


def _status_of(exc: Exception) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None) if response is not None else None
    return status if isinstance(status, int) else None


def _is_rate_limit_error(exc: Exception) -> bool:
    return _status_of(exc) == 429


def _message_text(message: object) -> str:
    parts = []
    for block in getattr(message, "content", None) or []:
        if getattr(block, "type", None) == "text":
            parts.append(block.text)
    return "".join(parts).strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_report(
    json_text: str,
    notes: str = "",
    locale: ReportLocale | str = ReportLocale.EN,
    client: Optional[Anthropic] = None,
) -> str:
    """Generate a markdown game report for an exported scorecard.

    Args:
        json_text: The exported scorecard document as JSON text.
        notes: Free-text context (opponent, venue, injuries...).
        locale: ``"en"`` or ``"zh"``; selects the report language.
        client: Anthropic client. Created from the environment when omitted.

    Returns:
        The report text, or ``EMPTY_REPORT_TEXT`` if the model returned none.

    Raises:
        ReportError: See the subclasses for the individual failure modes.
    """
    if client is None:
        if not get_api_key():
            raise MissingApiKeyError("Missing ANTHROPIC_API_KEY on server.")
        client = create_anthropic_client()

    validate_scorecard_json(json_text)
    system = build_system_prompt(locale)
    user = build_user_message(json_text, notes)

    message = None
    for attempt in range(CLAUDE_MAX_RETRIES):
        try:
            message = client.messages.create(
                model=get_report_model(),
                max_tokens=REPORT_MAX_TOKENS,
                temperature=REPORT_TEMPERATURE,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
            break
        except Exception as exc:
            if _is_rate_limit_error(exc) and attempt < CLAUDE_MAX_RETRIES - 1:
                retry_after = _extract_retry_after(exc)
                logger.warning(
                    "Claude API rate limit (429) on attempt %d/%d (Retry-After: %s)",
                    attempt + 1, CLAUDE_MAX_RETRIES,
                    retry_after if retry_after is not None else "not set",
                )
                _claude_backoff_sleep(attempt, retry_after=retry_after)
                continue
            logger.error("Report generation failed: %s", exc)
            raise ReportUpstreamError(f"Claude API error: {exc}") from exc

    return _message_text(message) or EMPTY_REPORT_TEXT


def generate_scorecard_report(scorecard, notes: str = "", locale: ReportLocale | str = ReportLocale.EN,
                              client: Optional[Anthropic] = None) -> str:
    """Export *scorecard* and generate its report in one call."""
    from export import export_json

    return generate_report(export_json(scorecard), notes=notes, locale=locale, client=client)
