"""Centralized configuration for environment variables."""

import os
from pathlib import Path

from anthropic import Anthropic

ANTHROPIC_KEY_ENV = "ANTHROPIC_API_KEY"
STORE_DIR_ENV = "SCORECARD_STORE_DIR"
REPORT_MODEL_ENV = "SCORECARD_REPORT_MODEL"
ENFORCE_INNING_END_ENV = "SCORECARD_ENFORCE_INNING_END"

DEFAULT_REPORT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_STORE_DIR = Path(__file__).resolve().parent / "data" / "scorecards"


def get_api_key() -> str:
    """Return the Anthropic API key, or empty string if not set."""
    return os.environ.get(ANTHROPIC_KEY_ENV, "")


def get_store_dir() -> Path:
    value = os.environ.get(STORE_DIR_ENV, "")
    return Path(value) if value else DEFAULT_STORE_DIR


def get_report_model() -> str:
    return os.environ.get(REPORT_MODEL_ENV, "") or DEFAULT_REPORT_MODEL


def enforce_inning_end() -> bool:
    """Whether cells after the third out reject scoring edits (default on)."""
    value = os.environ.get(ENFORCE_INNING_END_ENV, "1").strip().lower()
    return value not in ("0", "false", "no", "off")


def create_anthropic_client() -> Anthropic:
    """Create an Anthropic client using the configured API key."""
    return Anthropic(api_key=get_api_key())
