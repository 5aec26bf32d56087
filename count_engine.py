# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Ball/strike counting over a plate appearance's pitch sequence.

All functions are pure and accept any iterable of pitch marks; an empty
sequence counts as 0 balls, 0 strikes, no dead ball.
"""

from __future__ import annotations

from typing import Iterable

from models import PitchMark

STRIKEOUT_STRIKES = 3
WALK_BALLS = 4

_STRIKE_MARKS = {PitchMark.CALLED_STRIKE, PitchMark.SWINGING_STRIKE}


def strike_count(seq: Iterable[PitchMark]) -> int:
    """Return the strike count, saturating at 3.

    A foul counts as a strike only while the count is below two, so a foul
    ball can never complete the third strike.
    """
    strikes = 0
    for mark in seq:
        if mark in _STRIKE_MARKS:
            strikes += 1
        elif mark == PitchMark.FOUL and strikes < 2:
            strikes += 1
        if strikes >= STRIKEOUT_STRIKES:
            return STRIKEOUT_STRIKES
    return strikes


def ball_count(seq: Iterable[PitchMark]) -> int:
    """Return the number of balls. Fouls and dead balls are not balls."""
    return sum(1 for mark in seq if mark == PitchMark.BALL)


def has_dead_ball(seq: Iterable[PitchMark]) -> bool:
    return any(mark == PitchMark.DEAD for mark in seq)


def pitch_tally(seq: Iterable[PitchMark]) -> dict[str, int]:
    """Count each kind of mark, plus the total number of pitches thrown."""
    marks = list(seq)
    tally = {mark.value: 0 for mark in PitchMark}
    for mark in marks:
        tally[mark.value] += 1
    tally["total"] = len(marks)
    return tally


def format_pitch_count(seq: Iterable[PitchMark]) -> str:
    """Render the pitch-count line, e.g. ``Pitches: 5 B:2 CS:1 SS:1 F:1 D:0``."""
    tally = pitch_tally(seq)
    parts = [f"{mark.value}:{tally[mark.value]}" for mark in PitchMark]
    return f"Pitches: {tally['total']} " + " ".join(parts)
