# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the baseball scorecard.

Serialized field names are camelCase so stored and exported documents keep
the scorecard's on-disk shape; Python code uses the snake_case attributes.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


INNING_COUNT = 9
INNINGS: list[int] = list(range(1, INNING_COUNT + 1))

HOME_BASE = 0
SCORED = 4
MAX_OUTS = 3


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PitchMark(str, Enum):
    BALL = "B"
    CALLED_STRIKE = "CS"
    SWINGING_STRIKE = "SS"
    FOUL = "F"
    DEAD = "D"  # dead ball, hit by pitch


class Outcome(str, Enum):
    NONE = "—"
    IN_PLAY = "In Play"
    WALK = "Walk"
    HBP = "HBP"
    STRIKEOUT = "K"
    SINGLE = "1B"
    DOUBLE = "2B"
    TRIPLE = "3B"
    HOME_RUN = "HR"
    OUT = "Out"


class RunKind(str, Enum):
    HIT = "hit"
    ADVANCE = "advance"
    ERROR = "error"  # fielder's choice or error
    AWARD = "award"  # walk / HBP opening


class AwardType(str, Enum):
    WALK = "Walk"
    HBP = "HBP"


class TeamKey(str, Enum):
    HOME = "home"
    AWAY = "away"


HIT_OUTCOMES: dict[Outcome, int] = {
    Outcome.SINGLE: 1,
    Outcome.DOUBLE: 2,
    Outcome.TRIPLE: 3,
    Outcome.HOME_RUN: 4,
}

AWARD_OUTCOMES: dict[Outcome, AwardType] = {
    Outcome.WALK: AwardType.WALK,
    Outcome.HBP: AwardType.HBP,
}


def hit_outcome_for(bases: int) -> Outcome:
    """Map the bases gained on a hit (1-4) to its outcome."""
    for outcome, n in HIT_OUTCOMES.items():
        if n == bases:
            return outcome
    raise ValueError(f"bases must be 1-4, got {bases}")


# ---------------------------------------------------------------------------
# Scorecard records
# ---------------------------------------------------------------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RunSegment(_CamelModel):
    """One leg of a baserunner's path, from one base to a later one."""
    from_base: int = Field(alias="from", ge=0, le=3)
    to_base: int = Field(alias="to", ge=1, le=4)
    kind: RunKind = RunKind.ADVANCE
    award_type: Optional[AwardType] = None
    caused_by_batter: Optional[int] = Field(default=None, ge=1)
    note: Optional[str] = None

    @model_validator(mode="after")
    def _check_direction(self) -> RunSegment:
        if self.to_base <= self.from_base:
            raise ValueError(
                f"segment must move forward (from={self.from_base}, to={self.to_base})"
            )
        return self

    @property
    def scored(self) -> bool:
        return self.to_base == SCORED

    @property
    def is_opening(self) -> bool:
        return self.from_base == HOME_BASE


class Cell(_CamelModel):
    """A single plate appearance: one batter in one inning."""
    pitch_sequence: list[PitchMark] = Field(default_factory=list)
    outcome: Outcome = Outcome.NONE
    base_reached: int = Field(default=0, ge=0, le=4)
    outs_recorded: int = Field(default=0, ge=0, le=3)
    run_path: list[RunSegment] = Field(default_factory=list)
    notes: str = ""

    def with_path(self, run_path: list[RunSegment], **changes) -> Cell:
        """Return a copy with a new path and ``base_reached`` recomputed from it."""
        base = run_path[-1].to_base if run_path else 0
        return self.model_copy(update={**changes, "run_path": list(run_path), "base_reached": base})

    @property
    def is_empty(self) -> bool:
        return self == Cell()


class Player(BaseModel):
    """A lineup entry. The batting-order number is the row index + 1."""
    name: str
    number: Optional[str] = None
    position: Optional[str] = None


DEFAULT_PLAYERS: list[Player] = [
    Player(name="Leadoff", number="2", position="CF"),
    Player(name="Two-Hole", number="7", position="SS"),
    Player(name="Three-Hole", number="10", position="1B"),
    Player(name="Cleanup", number="23", position="3B"),
    Player(name="Five", number="9", position="LF"),
    Player(name="Six", number="15", position="RF"),
    Player(name="Seven", number="4", position="2B"),
    Player(name="Eight", number="12", position="C"),
    Player(name="Nine", number="31", position="P"),
]

def default_team_name(team: TeamKey) -> str:
    return "Home Team" if team == TeamKey.HOME else "Away Team"


def make_empty_row(innings: int = INNING_COUNT) -> list[Cell]:
    return [Cell() for _ in range(innings)]


def make_empty_grid(rows: int, innings: int = INNING_COUNT) -> list[list[Cell]]:
    return [make_empty_row(innings) for _ in range(rows)]
