# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Batting and scoring statistics derived from a scorecard grid.

Nothing is cached: every figure is recomputed from the cells on each call.
RBI credit follows the scorer's ``caused_by_batter`` tags wherever they
appear in the grid, including segments recorded in another batter's cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from models import HIT_OUTCOMES, Cell, Outcome, RunSegment

Grid = list[list[Cell]]

_NON_AT_BAT = {Outcome.NONE, Outcome.WALK, Outcome.HBP}


@dataclass
class BatterLine:
    ab: int = 0
    hits: int = 0
    runs: int = 0
    rbi: int = 0
    bb: int = 0
    k: int = 0
    hbp: int = 0

    @property
    def pa(self) -> int:
        return self.ab + self.bb + self.hbp

    def to_dict(self) -> dict:
        return {
            "AB": self.ab, "H": self.hits, "R": self.runs,
            "RBI": self.rbi, "BB": self.bb, "K": self.k, "HBP": self.hbp,
        }


def is_at_bat(outcome: Outcome) -> bool:
    return outcome not in _NON_AT_BAT


def is_hit(outcome: Outcome) -> bool:
    return outcome in HIT_OUTCOMES


def iter_segments(grid: Grid) -> Iterator[RunSegment]:
    for row in grid:
        for cell in row:
            yield from cell.run_path


def rbi_for(grid: Grid, batter_number: int) -> int:
    """Scoring segments anywhere in the grid credited to *batter_number*."""
    return sum(
        1 for seg in iter_segments(grid)
        if seg.scored and seg.caused_by_batter == batter_number
    )


def batter_line(grid: Grid, row: int) -> BatterLine:
    line = BatterLine()
    for cell in grid[row]:
        outcome = cell.outcome
        if is_at_bat(outcome):
            line.ab += 1
        if is_hit(outcome):
            line.hits += 1
        if outcome == Outcome.WALK:
            line.bb += 1
        elif outcome == Outcome.HBP:
            line.hbp += 1
        elif outcome == Outcome.STRIKEOUT:
            line.k += 1
        if cell.base_reached == 4:
            line.runs += 1
    line.rbi = rbi_for(grid, row + 1)
    return line


def batter_lines(grid: Grid) -> list[BatterLine]:
    return [batter_line(grid, r) for r in range(len(grid))]


def inning_runs(grid: Grid, innings: int) -> list[int]:
    """Team runs per inning column: segments reaching home in that column."""
    runs = [0] * innings
    for row in grid:
        for c, cell in enumerate(row[:innings]):
            runs[c] += sum(1 for seg in cell.run_path if seg.scored)
    return runs


def total_runs(grid: Grid, innings: int) -> int:
    return sum(inning_runs(grid, innings))


def team_totals(grid: Grid, innings: int) -> dict:
    lines = batter_lines(grid)
    return {
        "R": total_runs(grid, innings),
        "H": sum(line.hits for line in lines),
        "BB": sum(line.bb for line in lines),
        "K": sum(line.k for line in lines),
    }
