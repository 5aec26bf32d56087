# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Inning out tracking.

Two views of outs coexist:

- ``inning_outs[c]`` is the official cumulative count for inning column *c*.
- each cell's ``outs_recorded`` is a stamp of that cumulative count as of
  the plate appearance that made the out.

Reading the outs in effect at a row takes the most recent nonzero stamp at
or above it (not the maximum), so a later plate appearance's stamp always
wins. A partial reset recomputes the inning count as the maximum stamp that
remains, since the last stamp is no longer necessarily the authoritative one.

All functions return new lists; inputs are not modified. Coordinates outside
the grid are logged and ignored.
"""

from __future__ import annotations

import logging

from models import MAX_OUTS, Cell

logger = logging.getLogger(__name__)

Grid = list[list[Cell]]


def _valid(grid: Grid, col: int, row: int | None = None) -> bool:
    if not grid or not 0 <= col < len(grid[0]):
        return False
    return row is None or 0 <= row < len(grid)


def _copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def _stamp(grid: Grid, row: int, col: int, outs: int) -> None:
    grid[row][col] = grid[row][col].model_copy(update={"outs_recorded": outs})


def record_out(grid: Grid, inning_outs: list[int], row: int, col: int) -> tuple[Grid, list[int]]:
    """Add an out to the inning and stamp the new total on (row, col)."""
    if not _valid(grid, col, row):
        logger.warning("record_out: (%d, %d) is outside the grid", row, col)
        return grid, inning_outs
    count = min(MAX_OUTS, inning_outs[col] + 1)
    outs = list(inning_outs)
    outs[col] = count
    nxt = _copy_grid(grid)
    _stamp(nxt, row, col, count)
    return nxt, outs


def outs_up_to(grid: Grid, col: int, row: int) -> int:
    """Outs in effect at *row*: the last nonzero stamp in rows 0..row."""
    if not _valid(grid, col):
        return 0
    last = 0
    for r in range(min(row, len(grid) - 1) + 1):
        stamped = grid[r][col].outs_recorded
        if stamped > 0:
            last = stamped
    return last


def recompute_inning_outs(grid: Grid, col: int) -> int:
    """Largest stamp anywhere in column *col*."""
    if not _valid(grid, col):
        return 0
    return max((row[col].outs_recorded for row in grid), default=0)


def reset_inning(grid: Grid, inning_outs: list[int], col: int) -> tuple[Grid, list[int]]:
    if not _valid(grid, col):
        logger.warning("reset_inning: column %d is outside the grid", col)
        return grid, inning_outs
    nxt = _copy_grid(grid)
    for r in range(len(nxt)):
        _stamp(nxt, r, col, 0)
    outs = list(inning_outs)
    outs[col] = 0
    return nxt, outs


def reset_outs_from_row(
    grid: Grid, inning_outs: list[int], col: int, start_row: int
) -> tuple[Grid, list[int]]:
    """Clear stamps for rows >= start_row, then re-derive the inning count."""
    if not _valid(grid, col, start_row):
        logger.warning("reset_outs_from_row: (%d, %d) is outside the grid", start_row, col)
        return grid, inning_outs
    nxt = _copy_grid(grid)
    for r in range(start_row, len(nxt)):
        _stamp(nxt, r, col, 0)
    outs = list(inning_outs)
    outs[col] = recompute_inning_outs(nxt, col)
    return nxt, outs


def is_beyond_inning_end(grid: Grid, col: int, row: int) -> bool:
    """True for cells after the third out, other than the one that made it."""
    if not _valid(grid, col, row):
        return False
    return outs_up_to(grid, col, row) == MAX_OUTS and grid[row][col].outs_recorded != MAX_OUTS
