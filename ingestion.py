# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Scorecard ingestion: turn stored or imported JSON into well-formed models.

Stored data may be missing, partially shaped, or written by an older
version of the scorecard. The ``normalize_*`` functions never raise: any
absent or wrong-shaped field falls back to its default, numbers are clamped
into range, and run segments that cannot be repaired are dropped.

Older field names are still read:

==============  ================
legacy key      current key
==============  ================
``pitchSeq``    ``pitchSequence``
``outs``        ``outsRecorded``
``runs``        ``runPath``
``byBatter``    ``causedByBatter``
``award``       ``awardType``
==============  ================

Only :func:`parse_scorecard_document` raises, with
:class:`ScorecardImportError`, because an import the user asked for should
report why it failed.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Optional

from pydantic import ValidationError

from models import (
    DEFAULT_PLAYERS,
    INNING_COUNT,
    MAX_OUTS,
    AwardType,
    Cell,
    Outcome,
    PitchMark,
    Player,
    RunKind,
    RunSegment,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ScorecardImportError(Exception):
    """Raised when an imported scorecard document cannot be read at all."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _pick(obj: dict, *keys: str) -> Any:
    for key in keys:
        if key in obj:
            return obj[key]
    return None


def _as_int(value: Any, lo: int, hi: int, default: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return max(lo, min(hi, int(value)))


def _as_enum(enum_cls, value: Any, default=None):
    try:
        return enum_cls(value)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

def normalize_segment(raw: Any) -> Optional[RunSegment]:
    """Repair one stored run segment, or return None if it is unusable."""
    if not isinstance(raw, dict):
        return None
    start = _pick(raw, "from", "fromBase", "from_base")
    end = _pick(raw, "to", "toBase", "to_base")
    if isinstance(start, bool) or isinstance(end, bool):
        return None
    if not isinstance(start, (int, float)) or not isinstance(end, (int, float)):
        return None
    if not (math.isfinite(start) and math.isfinite(end)):
        return None
    start, end = int(start), int(end)
    if not (0 <= start <= 3 and 1 <= end <= 4 and end > start):
        return None

    kind = _as_enum(RunKind, raw.get("kind"), RunKind.ADVANCE)
    award = _as_enum(AwardType, _pick(raw, "awardType", "award_type", "award"))
    if kind == RunKind.AWARD and award is None:
        award = AwardType.WALK
    cause = _pick(raw, "causedByBatter", "caused_by_batter", "byBatter")
    if isinstance(cause, bool) or not isinstance(cause, int) or cause < 1:
        cause = None
    note = raw.get("note")
    return RunSegment(
        from_base=start,
        to_base=end,
        kind=kind,
        award_type=award if kind == RunKind.AWARD else None,
        caused_by_batter=cause,
        note=note if isinstance(note, str) else None,
    )


def normalize_cell(raw: Any) -> Cell:
    """Build a Cell from anything, defaulting each field that is not usable."""
    obj = raw if isinstance(raw, dict) else {}

    seq_raw = _pick(obj, "pitchSequence", "pitch_sequence", "pitchSeq")
    seq: list[PitchMark] = []
    if isinstance(seq_raw, list):
        for mark in seq_raw:
            parsed = _as_enum(PitchMark, mark)
            if parsed is not None:
                seq.append(parsed)

    path_raw = _pick(obj, "runPath", "run_path", "runs")
    path: list[RunSegment] = []
    if isinstance(path_raw, list):
        for seg in path_raw:
            normalized = normalize_segment(seg)
            if normalized is not None:
                path.append(normalized)

    notes = obj.get("notes")
    cell = Cell(
        pitch_sequence=seq,
        outcome=_as_enum(Outcome, obj.get("outcome"), Outcome.NONE),
        outs_recorded=_as_int(_pick(obj, "outsRecorded", "outs_recorded", "outs"), 0, MAX_OUTS),
        notes=notes if isinstance(notes, str) else "",
    )
    # baseReached is derived from the path; a stored value is never trusted.
    return cell.with_path(path)


def normalize_grid(raw: Any, rows: int, innings: int = INNING_COUNT) -> list[list[Cell]]:
    """Shape *raw* into exactly ``rows`` x ``innings`` cells."""
    grid = raw if isinstance(raw, list) else []
    out: list[list[Cell]] = []
    for r in range(rows):
        row = grid[r] if r < len(grid) and isinstance(grid[r], list) else []
        out.append([normalize_cell(row[c] if c < len(row) else None) for c in range(innings)])
    return out


# ---------------------------------------------------------------------------
# Players and inning outs
# ---------------------------------------------------------------------------

_ORDER_PREFIX = re.compile(r"^\d+\.?\s*")


def normalize_players(raw: Any) -> list[Player]:
    """Read a lineup; an old list of ``"1. Name"`` strings is migrated."""
    if not isinstance(raw, list) or not raw:
        return [p.model_copy() for p in DEFAULT_PLAYERS]
    players: list[Player] = []
    for i, entry in enumerate(raw):
        if isinstance(entry, str):
            name = _ORDER_PREFIX.sub("", entry) or f"Player {i + 1}"
            players.append(Player(name=name))
            continue
        if isinstance(entry, dict):
            name = entry.get("name")
            number, position = entry.get("number"), entry.get("position")
            try:
                players.append(Player(
                    name=name if isinstance(name, str) and name else f"Player {i + 1}",
                    number=str(number) if isinstance(number, (str, int)) else None,
                    position=position if isinstance(position, str) else None,
                ))
                continue
            except ValidationError:
                logger.warning("normalize_players: unreadable player at row %d", i + 1)
        players.append(Player(name=f"Player {i + 1}"))
    return players


def normalize_inning_outs(raw: Any, innings: int = INNING_COUNT) -> list[int]:
    values = raw if isinstance(raw, list) else []
    return [
        _as_int(values[c] if c < len(values) else 0, 0, MAX_OUTS)
        for c in range(innings)
    ]


# ---------------------------------------------------------------------------
# Imported documents
# ---------------------------------------------------------------------------

def parse_scorecard_document(text: str) -> dict:
    """Parse an exported scorecard (``teamName``, ``players``, ``grid``...).

    Returns a dict with normalized ``team_name``, ``players`` and ``grid``.

    Raises:
        ScorecardImportError: If the text is not a JSON object.
    """
    if not isinstance(text, str) or not text.strip():
        raise ScorecardImportError("Scorecard document is empty")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScorecardImportError(f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ScorecardImportError("Scorecard document must be a JSON object")

    players = normalize_players(payload.get("players"))
    team_name = payload.get("teamName")
    return {
        "team_name": team_name if isinstance(team_name, str) else "My Team",
        "players": players,
        "grid": normalize_grid(payload.get("grid"), len(players)),
        "inning_outs": normalize_inning_outs(payload.get("inningOuts")),
    }
