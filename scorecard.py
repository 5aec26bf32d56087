# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Team scorecard grid and the scorekeeping session.

``TeamScorecard`` owns one team's lineup, its [batter][inning] grid of cells
and the per-inning out counts. Every mutating method computes the complete
next grid (and out list) and commits it in one assignment.

``ScorekeeperSession`` is the context passed around by the outer surfaces:
it knows which team is active, persists that team after each change, and
resolves raw diamond clicks (modifier keys plus any armed batter/award) into
reducer intents. Switching teams saves the current team before loading the
other one.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from arming import ArmingState
from baserunner_path import LastClick, kind_for_modifiers
from cell_reducer import TEXT_ONLY_INTENTS, AddRun, CellIntent, reduce_cell
from data.store import TEAM_FIELDS, JsonStore, team_key
from ingestion import normalize_grid, normalize_inning_outs, normalize_players
from inning_outs import (
    is_beyond_inning_end,
    outs_up_to,
    recompute_inning_outs,
    record_out,
    reset_inning,
    reset_outs_from_row,
)
from models import (
    DEFAULT_PLAYERS,
    INNING_COUNT,
    Cell,
    Player,
    RunKind,
    TeamKey,
    default_team_name,
    make_empty_grid,
    make_empty_row,
)
from stats import BatterLine, batter_lines, inning_runs, team_totals, total_runs

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# One team's scorecard
# ---------------------------------------------------------------------------

@dataclass
class TeamScorecard:
    team_name: str = "My Team"
    players: list[Player] = field(default_factory=lambda: [p.model_copy() for p in DEFAULT_PLAYERS])
    grid: list[list[Cell]] = field(default_factory=list)
    inning_outs: list[int] = field(default_factory=lambda: [0] * INNING_COUNT)
    enforce_inning_end: bool = True
    # merge-window memory per (row, col); not persisted
    last_clicks: dict[tuple[int, int], LastClick] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        # keep one row per batter and one cell per inning
        rows = [list(r[:INNING_COUNT]) for r in self.grid[:len(self.players)]]
        for row in rows:
            row.extend(Cell() for _ in range(INNING_COUNT - len(row)))
        rows.extend(make_empty_row() for _ in range(len(self.players) - len(rows)))
        self.grid = rows
        self.inning_outs = normalize_inning_outs(self.inning_outs)

    # -- lookups -----------------------------------------------------------

    @property
    def innings(self) -> int:
        return INNING_COUNT

    def in_grid(self, row: int, col: int) -> bool:
        return 0 <= row < len(self.grid) and 0 <= col < self.innings

    def cell(self, row: int, col: int) -> Cell:
        return self.grid[row][col]

    def outs_in_effect(self, row: int, col: int) -> int:
        return outs_up_to(self.grid, col, row)

    def is_locked(self, row: int, col: int) -> bool:
        """Whether (row, col) comes after the inning's third out."""
        return self.enforce_inning_end and is_beyond_inning_end(self.grid, col, row)

    # -- cell edits --------------------------------------------------------

    def apply(self, row: int, col: int, intent: CellIntent) -> bool:
        """Run one intent on a cell. Returns False when the edit was rejected."""
        if not self.in_grid(row, col):
            logger.warning("apply: (%d, %d) is outside the grid", row, col)
            return False
        if self.is_locked(row, col) and not isinstance(intent, TEXT_ONLY_INTENTS):
            logger.info("apply: cell (%d, %d) is past the third out, ignoring %s",
                        row, col, intent.action)
            return False

        update = reduce_cell(
            self.grid[row][col],
            intent,
            batter_number=row + 1,
            last_click=self.last_clicks.get((row, col)),
        )
        grid = [list(r) for r in self.grid]
        grid[row][col] = update.cell
        self.grid = grid
        if update.last_click is None:
            self.last_clicks.pop((row, col), None)
        else:
            self.last_clicks[(row, col)] = update.last_click

        # The strikeout out is recorded after the cell itself is committed.
        if update.record_out:
            self.record_out(row, col)
        return True

    # -- outs --------------------------------------------------------------

    def record_out(self, row: int, col: int) -> bool:
        if not self.in_grid(row, col) or self.is_locked(row, col):
            return False
        self.grid, self.inning_outs = record_out(self.grid, self.inning_outs, row, col)
        return True

    def reset_inning(self, col: int) -> None:
        self.grid, self.inning_outs = reset_inning(self.grid, self.inning_outs, col)

    def reset_outs_from(self, row: int, col: int) -> None:
        self.grid, self.inning_outs = reset_outs_from_row(self.grid, self.inning_outs, col, row)

    # -- lineup ------------------------------------------------------------

    def add_player(self, player: Optional[Player] = None) -> Player:
        player = player or Player(name=f"Player {len(self.players) + 1}")
        self.players = [*self.players, player]
        self.grid = [*self.grid, make_empty_row(self.innings)]
        return player

    def remove_last_player(self) -> bool:
        """Drop the last batter and their row; the lineup never goes below one."""
        if len(self.players) <= 1:
            return False
        self.players = self.players[:-1]
        self.grid = self.grid[:-1]
        self.last_clicks = {k: v for k, v in self.last_clicks.items() if k[0] < len(self.grid)}
        self.inning_outs = [recompute_inning_outs(self.grid, c) for c in range(self.innings)]
        return True

    def update_player(self, row: int, **changes) -> Player:
        player = self.players[row].model_copy(update=changes)
        self.players = [player if i == row else p for i, p in enumerate(self.players)]
        return player

    def clear(self) -> None:
        """Reset every cell and every inning's outs; the lineup is kept."""
        self.grid = make_empty_grid(len(self.players), self.innings)
        self.inning_outs = [0] * self.innings
        self.last_clicks = {}

    # -- statistics --------------------------------------------------------

    def batter_lines(self) -> list[BatterLine]:
        return batter_lines(self.grid)

    def inning_runs(self) -> list[int]:
        return inning_runs(self.grid, self.innings)

    def total_runs(self) -> int:
        return total_runs(self.grid, self.innings)

    def team_totals(self) -> dict:
        return team_totals(self.grid, self.innings)

    # -- persistence -------------------------------------------------------

    def snapshot(self) -> dict:
        """Plain values for the store, keyed by the stored field names."""
        return {
            "teamName": self.team_name,
            "players": [p.model_dump(exclude_none=True) for p in self.players],
            "grid": [[c.model_dump(by_alias=True, exclude_none=True, mode="json") for c in row]
                     for row in self.grid],
            "inningOuts": list(self.inning_outs),
        }

    def save(self, store: JsonStore, team: TeamKey) -> None:
        snapshot = self.snapshot()
        for key in TEAM_FIELDS:
            store.save(team_key(team.value, key), snapshot[key])

    @classmethod
    def load(cls, store: JsonStore, team: TeamKey, enforce_inning_end: bool = True) -> TeamScorecard:
        """Restore a team from the store, defaulting anything missing or malformed."""
        stored = {key: store.load(team_key(team.value, key), None) for key in TEAM_FIELDS}
        name = stored["teamName"]
        players = normalize_players(stored["players"])
        scorecard = cls(
            team_name=name if isinstance(name, str) else default_team_name(team),
            players=players,
            enforce_inning_end=enforce_inning_end,
        )
        scorecard.grid = normalize_grid(stored["grid"], len(players))
        scorecard.inning_outs = normalize_inning_outs(stored["inningOuts"])
        return scorecard


# ---------------------------------------------------------------------------
# Session: the active team plus transient input state
# ---------------------------------------------------------------------------

class ScorekeeperSession:
    """Explicit context for all scorecard operations.

    Args:
        store: Persistence backend.
        team: Team to load first.
        clock: Source of "now" in seconds, used for arming and merge windows.
        enforce_inning_end: Lock cells that come after the third out.
    """

    def __init__(
        self,
        store: JsonStore,
        team: TeamKey = TeamKey.HOME,
        clock: Callable[[], float] = time.monotonic,
        enforce_inning_end: bool = True,
    ) -> None:
        self.store = store
        self.clock = clock
        self.enforce_inning_end = enforce_inning_end
        self.arming = ArmingState()
        self.active_team = TeamKey(team)
        self.scorecard = TeamScorecard.load(store, self.active_team, enforce_inning_end)

    def save(self) -> None:
        self.scorecard.save(self.store, self.active_team)

    def switch_team(self, team: TeamKey) -> TeamScorecard:
        """Save the active team, then load *team* and make it active."""
        team = TeamKey(team)
        if team == self.active_team:
            return self.scorecard
        self.save()
        self.scorecard = TeamScorecard.load(self.store, team, self.enforce_inning_end)
        self.active_team = team
        self.arming.cancel()
        logger.info("Switched active team to %s (%s)", team.value, self.scorecard.team_name)
        return self.scorecard

    # -- actions -----------------------------------------------------------

    def apply(self, row: int, col: int, intent: CellIntent) -> bool:
        applied = self.scorecard.apply(row, col, intent)
        if applied:
            self.save()
        return applied

    def press_key(self, key: str) -> bool:
        return self.arming.handle_key(key, self.clock())

    def diamond_click(
        self,
        row: int,
        col: int,
        ctrl: bool = False,
        shift: bool = False,
        note: Optional[str] = None,
    ) -> bool:
        """Add a run segment from a diamond click, consuming any armed values."""
        now = self.clock()
        cause, award = self.arming.consume(now)
        kind = RunKind.AWARD if award is not None else kind_for_modifiers(ctrl=ctrl, shift=shift)
        intent = AddRun(kind=kind, at=now, caused_by=cause, note=note, award_type=award)
        return self.apply(row, col, intent)

    def record_out(self, row: int, col: int) -> bool:
        recorded = self.scorecard.record_out(row, col)
        if recorded:
            self.save()
        return recorded

    def reset_inning(self, col: int) -> None:
        self.scorecard.reset_inning(col)
        self.save()

    def reset_outs_from(self, row: int, col: int) -> None:
        self.scorecard.reset_outs_from(row, col)
        self.save()

    def add_player(self, player: Optional[Player] = None) -> Player:
        player = self.scorecard.add_player(player)
        self.save()
        return player

    def remove_last_player(self) -> bool:
        removed = self.scorecard.remove_last_player()
        if removed:
            self.save()
        return removed

    def rename_team(self, name: str) -> None:
        self.scorecard.team_name = name
        self.save()

    def clear(self) -> None:
        self.scorecard.clear()
        self.save()
