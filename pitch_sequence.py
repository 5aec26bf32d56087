# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Editing operations on a plate appearance's pitch sequence.

Every operation returns a new list and leaves its input untouched. Indices
outside the sequence are ignored rather than raising, matching how the
scorecard treats any out-of-range interaction.
"""

from __future__ import annotations

import logging

from models import PitchMark

logger = logging.getLogger(__name__)


def _in_range(seq: list[PitchMark], index: int) -> bool:
    return 0 <= index < len(seq)


def append_pitch(seq: list[PitchMark], mark: PitchMark) -> list[PitchMark]:
    return [*seq, PitchMark(mark)]


def insert_pitch(seq: list[PitchMark], index: int, mark: PitchMark) -> list[PitchMark]:
    """Insert *mark* before position *index* (clamped to the sequence bounds)."""
    index = max(0, min(index, len(seq)))
    return [*seq[:index], PitchMark(mark), *seq[index:]]


def remove_pitch(seq: list[PitchMark], index: int) -> list[PitchMark]:
    if not _in_range(seq, index):
        logger.warning("remove_pitch: index %d out of range (len=%d)", index, len(seq))
        return list(seq)
    return [*seq[:index], *seq[index + 1:]]


def replace_pitch(seq: list[PitchMark], index: int, mark: PitchMark) -> list[PitchMark]:
    if not _in_range(seq, index):
        logger.warning("replace_pitch: index %d out of range (len=%d)", index, len(seq))
        return list(seq)
    nxt = list(seq)
    nxt[index] = PitchMark(mark)
    return nxt


def swap_pitches(seq: list[PitchMark], a: int, b: int) -> list[PitchMark]:
    """Swap two marks, e.g. when one is dragged onto another."""
    if a == b or not _in_range(seq, a) or not _in_range(seq, b):
        return list(seq)
    nxt = list(seq)
    nxt[a], nxt[b] = nxt[b], nxt[a]
    return nxt
