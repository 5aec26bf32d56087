# /// script
# requires-python = ">=3.12"
# dependencies = ["flask>=3.0", "pydantic>=2.0", "anthropic>=0.78.0"]
# ///
"""JSON API for the scorecard.

Exposes the scorekeeping session (cells, outs, arming keys, lineup) and the
game report endpoint to a browser front end.

Usage:
    uv run app.py
"""

from __future__ import annotations

import logging
import os
import threading

from flask import Flask, Response, jsonify, request
from pydantic import ValidationError

from cell_reducer import parse_intent
from config import enforce_inning_end, get_store_dir
from data.store import JsonStore
from export import build_export_document, export_filename, export_json
from ingestion import normalize_players
from models import TeamKey
from report import ReportError, generate_report
from scorecard import ScorekeeperSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = Flask(__name__)

# One scorekeeping session per process, created on first use
_session: ScorekeeperSession | None = None
_session_lock = threading.Lock()


def get_session() -> ScorekeeperSession:
    global _session
    if _session is None:
        _session = ScorekeeperSession(
            JsonStore(get_store_dir()),
            enforce_inning_end=enforce_inning_end(),
        )
    return _session


def _team_or_none(team: str) -> TeamKey | None:
    try:
        return TeamKey(team)
    except ValueError:
        return None


def _team_state(session: ScorekeeperSession) -> dict:
    sc = session.scorecard
    rows = range(len(sc.grid))
    cols = range(sc.innings)
    return {
        "team": session.active_team.value,
        **build_export_document(sc),
        "inningOuts": list(sc.inning_outs),
        "outsInEffect": [[sc.outs_in_effect(r, c) for c in cols] for r in rows],
        "locked": [[sc.is_locked(r, c) for c in cols] for r in rows],
        "inningRuns": sc.inning_runs(),
        "totals": sc.team_totals(),
        "batting": [line.to_dict() for line in sc.batter_lines()],
        "arming": session.arming.to_dict(session.clock()),
    }


def _respond(session: ScorekeeperSession, applied: bool = True):
    body = _team_state(session)
    body["applied"] = applied
    return jsonify(body), (200 if applied else 409)


# ---------------------------------------------------------------------------
# Report route
# ---------------------------------------------------------------------------


@app.route("/api/analyze", methods=["POST"])
def api_analyze():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    try:
        text = generate_report(
            data.get("jsonText"),
            notes=data.get("notes") or "",
            locale=data.get("locale") or "en",
        )
    except ReportError as e:
        return jsonify({"error": str(e)}), e.status_code
    return jsonify({"report": text})


# ---------------------------------------------------------------------------
# Scorecard routes
# ---------------------------------------------------------------------------


@app.route("/api/teams/<team>")
def api_team(team: str):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        return jsonify(_team_state(session))


@app.route("/api/teams/<team>/cells/<int:row>/<int:col>", methods=["POST"])
def api_cell(team: str, row: int, col: int):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        if data.get("action") == "diamond_click":
            applied = session.diamond_click(
                row, col,
                ctrl=bool(data.get("ctrl")),
                shift=bool(data.get("shift")),
                note=data.get("note"),
            )
        else:
            try:
                intent = parse_intent(data)
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            applied = session.apply(row, col, intent)
        return _respond(session, applied)


@app.route("/api/teams/<team>/outs/<int:col>/<int:row>", methods=["POST"])
def api_record_out(team: str, col: int, row: int):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        return _respond(session, session.record_out(row, col))


@app.route("/api/teams/<team>/outs/<int:col>/<int:row>/reset", methods=["POST"])
def api_reset_outs_from(team: str, col: int, row: int):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        session.reset_outs_from(row, col)
        return _respond(session)


@app.route("/api/teams/<team>/innings/<int:col>/reset", methods=["POST"])
def api_reset_inning(team: str, col: int):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        session.reset_inning(col)
        return _respond(session)


@app.route("/api/teams/<team>/keys", methods=["POST"])
def api_key_press(team: str):
    """Arm a batter number or award from a key press (``{"key": "3"}``)."""
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        handled = session.press_key(str(data.get("key", "")))
        return jsonify({"handled": handled, "arming": session.arming.to_dict(session.clock())})


@app.route("/api/teams/<team>/players", methods=["POST", "DELETE"])
def api_players(team: str):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        if request.method == "DELETE":
            return _respond(session, session.remove_last_player())
        data = request.get_json(silent=True) or {}
        player = None
        if isinstance(data, dict) and data.get("name"):
            player = normalize_players([data])[0]
        session.add_player(player)
        return _respond(session)


@app.route("/api/teams/<team>/export")
def api_export(team: str):
    key = _team_or_none(team)
    if key is None:
        return jsonify({"error": f"Unknown team: {team}"}), 404
    with _session_lock:
        session = get_session()
        session.switch_team(key)
        sc = session.scorecard
        return Response(
            export_json(sc),
            mimetype="application/json",
            headers={"Content-Disposition": f'attachment; filename="{export_filename(sc.team_name)}"'},
        )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    port = int(os.environ.get("PORT", 5050))
    app.run(debug=True, host="0.0.0.0", port=port, threaded=True)
