# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "anthropic>=0.78.0"]
# ///
"""Tests for environment-driven configuration."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

import config


def test_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    assert config.get_api_key() == ""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    assert config.get_api_key() == "sk-test"


def test_store_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("SCORECARD_STORE_DIR", raising=False)
    assert config.get_store_dir() == config.DEFAULT_STORE_DIR
    monkeypatch.setenv("SCORECARD_STORE_DIR", str(tmp_path))
    assert config.get_store_dir() == tmp_path


def test_report_model(monkeypatch):
    monkeypatch.setenv("SCORECARD_REPORT_MODEL", "")
    assert config.get_report_model() == config.DEFAULT_REPORT_MODEL


@pytest.mark.parametrize("value,expected", [
    (None, True), ("1", True), ("true", True), ("0", False), ("False", False), (" off ", False),
])
def test_enforce_inning_end(monkeypatch, value, expected):
    if value is None:
        monkeypatch.delenv("SCORECARD_ENFORCE_INNING_END", raising=False)
    else:
        monkeypatch.setenv("SCORECARD_ENFORCE_INNING_END", value)
    assert config.enforce_inning_end() is expected
