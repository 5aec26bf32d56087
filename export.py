# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Scorecard export and import.

The exported document is the hand-off format for the game report::

    {"teamName": ..., "players": [...], "grid": [[cell, ...], ...], "innings": [1, ..., 9]}

It is also what :func:`load_export` reads back into a ``TeamScorecard``.
"""

from __future__ import annotations

import json
import re
from pathlib import Path

from baserunner_path import describe_segment
from count_engine import format_pitch_count
from ingestion import parse_scorecard_document
from inning_outs import recompute_inning_outs
from models import INNINGS
from scorecard import TeamScorecard


def build_export_document(scorecard: TeamScorecard) -> dict:
    snap = scorecard.snapshot()
    return {
        "teamName": snap["teamName"],
        "players": snap["players"],
        "grid": snap["grid"],
        "innings": list(INNINGS),
    }


def export_json(scorecard: TeamScorecard, indent: int = 2) -> str:
    return json.dumps(build_export_document(scorecard), indent=indent, ensure_ascii=False)


def export_filename(team_name: str) -> str:
    """File name for a download, e.g. ``Bay_Bears_scorecard.json``."""
    slug = re.sub(r"\s+", "_", team_name)
    return f"{slug}_scorecard.json"


def write_export(scorecard: TeamScorecard, directory: str | Path) -> Path:
    path = Path(directory) / export_filename(scorecard.team_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_json(scorecard), encoding="utf-8")
    return path


def load_export(text: str, enforce_inning_end: bool = True) -> TeamScorecard:
    """Rebuild a scorecard from an exported document.

    Raises:
        ScorecardImportError: If *text* is not a JSON object.
    """
    parsed = parse_scorecard_document(text)
    scorecard = TeamScorecard(
        team_name=parsed["team_name"],
        players=parsed["players"],
        grid=parsed["grid"],
        enforce_inning_end=enforce_inning_end,
    )
    if any(parsed["inning_outs"]):
        scorecard.inning_outs = parsed["inning_outs"]
    else:
        # exports do not carry inning outs; rebuild them from the cell stamps
        scorecard.inning_outs = [
            recompute_inning_outs(scorecard.grid, c) for c in range(scorecard.innings)
        ]
    return scorecard


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

def format_box_score(scorecard: TeamScorecard) -> str:
    """Line score plus batting lines, in a fixed-width text layout."""
    lines = []
    lines.append("=" * 72)
    lines.append(f"{scorecard.team_name.upper()} SCORECARD")
    lines.append("=" * 72)

    header = f"{'Inning':<20}"
    for i in INNINGS:
        header += f" {i:>3}"
    header += "  |   R   H"
    lines.append(header)
    lines.append("-" * len(header))

    totals = scorecard.team_totals()
    row = f"{scorecard.team_name[:20]:<20}"
    for runs in scorecard.inning_runs():
        row += f" {runs:>3}"
    row += f"  | {totals['R']:>3} {totals['H']:>3}"
    lines.append(row)

    outs_row = f"{'Outs':<20}"
    for outs in scorecard.inning_outs:
        outs_row += f" {outs:>3}"
    lines.append(outs_row)

    lines.append(f"\n{scorecard.team_name} Batting:")
    lines.append(f"  {'#':>2} {'Name':<20} {'Pos':<4} {'AB':>3} {'H':>3} {'R':>3} {'RBI':>4} {'BB':>3} {'K':>3}")
    lines.append(f"  {'-'*2} {'-'*20} {'-'*4} {'-'*3} {'-'*3} {'-'*3} {'-'*4} {'-'*3} {'-'*3}")
    for order, (player, stat) in enumerate(zip(scorecard.players, scorecard.batter_lines()), 1):
        b = stat.to_dict()
        lines.append(
            f"  {order:>2} {player.name[:20]:<20} {player.position or '—':<4} {b['AB']:>3} {b['H']:>3} "
            f"{b['R']:>3} {b['RBI']:>4} {b['BB']:>3} {b['K']:>3}"
        )
    return "\n".join(lines)


def format_plate_appearances(scorecard: TeamScorecard) -> str:
    """One line per recorded plate appearance, inning by inning."""
    lines = []
    for c in range(scorecard.innings):
        for r, player in enumerate(scorecard.players):
            cell = scorecard.cell(r, c)
            if cell.is_empty:
                continue
            path = "; ".join(describe_segment(seg) for seg in cell.run_path) or "no advance"
            lines.append(
                f"Inn {c + 1} #{r + 1} {player.name}: {cell.outcome.value} "
                f"({format_pitch_count(cell.pitch_sequence)}) outs={scorecard.outs_in_effect(r, c)} "
                f"path=[{path}]"
            )
    return "\n".join(lines)
