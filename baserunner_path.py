# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Baserunner path construction.

A cell's run path is an ordered list of segments tracing the batter from the
plate (base 0) toward home (base 4). Clicking the diamond adds one base at a
time; a quick repeat of the same kind of click stretches the last segment
instead, so a double can be entered as two fast clicks.

Functions return new lists; segments are never mutated in place.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from models import SCORED, AwardType, RunKind, RunSegment

logger = logging.getLogger(__name__)

MERGE_WINDOW_S = 0.35


@dataclass(frozen=True)
class LastClick:
    """Kind and time of the previous diamond interaction on a cell."""
    kind: RunKind
    at: float


def kind_for_modifiers(ctrl: bool = False, shift: bool = False) -> RunKind:
    """Shift marks a fielder's choice/error, Ctrl marks a hit, otherwise advance."""
    if shift:
        return RunKind.ERROR
    if ctrl:
        return RunKind.HIT
    return RunKind.ADVANCE


def base_reached(path: list[RunSegment]) -> int:
    return path[-1].to_base if path else 0


def next_from_base(path: list[RunSegment]) -> int:
    return base_reached(path)


def is_complete(path: list[RunSegment]) -> bool:
    """True once the runner has scored; the path only restarts via reset."""
    return base_reached(path) >= SCORED


def add_segment(
    path: list[RunSegment],
    kind: RunKind,
    now: float,
    last_click: Optional[LastClick] = None,
    caused_by: Optional[int] = None,
    note: Optional[str] = None,
    award_type: Optional[AwardType] = None,
) -> tuple[list[RunSegment], Optional[LastClick]]:
    """Add one base of progress to *path* for a diamond click.

    Returns the new path and the click memory to pass to the next call.
    """
    kind = RunKind(kind)
    if is_complete(path):
        logger.warning("add_segment: runner already scored, ignoring %s click", kind.value)
        return list(path), last_click

    if (
        path
        and last_click is not None
        and last_click.kind == kind
        and now - last_click.at < MERGE_WINDOW_S
    ):
        last = path[-1]
        extended = last.model_copy(update={"to_base": min(SCORED, last.to_base + 1)})
        return [*path[:-1], extended], LastClick(kind, now)

    start = next_from_base(path)
    if kind == RunKind.AWARD:
        seg = RunSegment(
            from_base=start,
            to_base=start + 1,
            kind=kind,
            award_type=award_type or AwardType.WALK,
            caused_by_batter=caused_by,
            note=note,
        )
    else:
        seg = RunSegment(
            from_base=start,
            to_base=start + 1,
            kind=kind,
            caused_by_batter=caused_by,
            note=note,
        )
    return [*path, seg], LastClick(kind, now)


def advance_runner(
    path: list[RunSegment],
    kind: RunKind,
    bases: int,
    caused_by: Optional[int] = None,
    note: Optional[str] = None,
) -> list[RunSegment]:
    """Append one segment covering *bases* bases (capped at home)."""
    if not 1 <= bases <= 4:
        raise ValueError(f"bases must be 1-4, got {bases}")
    if is_complete(path):
        logger.warning("advance_runner: runner already scored, ignoring")
        return list(path)
    kind = RunKind(kind)
    start = next_from_base(path)
    seg = RunSegment(
        from_base=start,
        to_base=min(SCORED, start + bases),
        kind=kind,
        award_type=AwardType.WALK if kind == RunKind.AWARD else None,
        caused_by_batter=caused_by,
        note=note,
    )
    return [*path, seg]


def replace_opening(path: list[RunSegment], opening: list[RunSegment]) -> list[RunSegment]:
    """Swap the batter's own leading segment, keeping teammate continuations."""
    later = [seg for seg in path if not seg.is_opening]
    return [*opening, *later]


def update_segment_note(path: list[RunSegment], index: int, note: str) -> list[RunSegment]:
    if not 0 <= index < len(path):
        logger.warning("update_segment_note: index %d out of range (len=%d)", index, len(path))
        return list(path)
    return [
        seg.model_copy(update={"note": note}) if i == index else seg
        for i, seg in enumerate(path)
    ]


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------

class SegmentStyle(str, Enum):
    HIT = "hit"          # solid red
    PROGRESS = "progress"  # solid black (advance) / gray (error)
    AWARD = "award"      # dashed black


_KIND_LABELS = {
    RunKind.HIT: "Hit",
    RunKind.ADVANCE: "Advance",
    RunKind.ERROR: "FC/Error",
    RunKind.AWARD: "Award",
}


def segment_style(seg: RunSegment) -> SegmentStyle:
    if seg.kind == RunKind.HIT:
        return SegmentStyle.HIT
    if seg.kind == RunKind.AWARD:
        return SegmentStyle.AWARD
    return SegmentStyle.PROGRESS


def describe_segment(seg: RunSegment) -> str:
    """Short label such as ``Hit · 0→2 · by #3``."""
    label = _KIND_LABELS[seg.kind]
    if seg.kind == RunKind.AWARD and seg.award_type:
        label = seg.award_type.value
    text = f"{label} · {seg.from_base}→{seg.to_base}"
    if seg.caused_by_batter is not None:
        text += f" · by #{seg.caused_by_batter}"
    return text
