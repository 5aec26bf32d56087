# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Plate-appearance reducer.

Every scorer action on a cell is expressed as one intent, and
``reduce_cell(cell, intent, batter_number)`` returns the one next cell for
it. Outcome, run path and base reached are always computed together here,
which is what keeps the two-way outcome/path sync from fighting itself:

- pitch edits (a whole new sequence, or one append, insert, remove,
  replace or swap) may auto-set Strikeout, HBP or Walk, in that precedence;
- choosing an outcome rewrites the batter's leading segment;
- editing the path back-derives the outcome from the leading segment.

Intents are pydantic models discriminated on ``action`` so that JSON
payloads from the web API validate directly into them::

    intent = parse_intent({"action": "select_outcome", "outcome": "2B"})
    update = reduce_cell(cell, intent, batter_number=3)
    if update.record_out:
        ...  # record the strikeout out after committing update.cell
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from baserunner_path import (
    LastClick,
    add_segment,
    advance_runner,
    replace_opening,
    update_segment_note,
)
from count_engine import STRIKEOUT_STRIKES, WALK_BALLS, ball_count, has_dead_ball, strike_count
from pitch_sequence import append_pitch, insert_pitch, remove_pitch, replace_pitch, swap_pitches
from models import (
    AWARD_OUTCOMES,
    HIT_OUTCOMES,
    AwardType,
    Cell,
    Outcome,
    PitchMark,
    RunKind,
    RunSegment,
    hit_outcome_for,
)


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------

class SetPitches(BaseModel):
    action: Literal["set_pitches"] = "set_pitches"
    sequence: list[PitchMark]


class AppendPitch(BaseModel):
    action: Literal["append_pitch"] = "append_pitch"
    mark: PitchMark


class InsertPitch(BaseModel):
    action: Literal["insert_pitch"] = "insert_pitch"
    index: int
    mark: PitchMark


class RemovePitch(BaseModel):
    action: Literal["remove_pitch"] = "remove_pitch"
    index: int


class ReplacePitch(BaseModel):
    action: Literal["replace_pitch"] = "replace_pitch"
    index: int
    mark: PitchMark


class SwapPitches(BaseModel):
    """Drag one pitch mark onto another."""
    action: Literal["swap_pitches"] = "swap_pitches"
    a: int
    b: int


class SelectOutcome(BaseModel):
    action: Literal["select_outcome"] = "select_outcome"
    outcome: Outcome


class AddRun(BaseModel):
    """A diamond click, already resolved to a kind and credit."""
    action: Literal["add_run"] = "add_run"
    kind: RunKind = RunKind.ADVANCE
    at: float = 0.0
    caused_by: Optional[int] = Field(default=None, ge=1)
    note: Optional[str] = None
    award_type: Optional[AwardType] = None


class AdvanceRunner(BaseModel):
    action: Literal["advance_runner"] = "advance_runner"
    kind: RunKind = RunKind.ADVANCE
    bases: int = Field(default=1, ge=1, le=4)
    caused_by: Optional[int] = Field(default=None, ge=1)
    note: Optional[str] = None


class ResetPath(BaseModel):
    action: Literal["reset_path"] = "reset_path"


class EditSegmentNote(BaseModel):
    action: Literal["edit_segment_note"] = "edit_segment_note"
    index: int
    note: str


class EditNotes(BaseModel):
    action: Literal["edit_notes"] = "edit_notes"
    notes: str


CellIntent = Annotated[
    Union[
        SetPitches, AppendPitch, InsertPitch, RemovePitch, ReplacePitch, SwapPitches,
        SelectOutcome, AddRun, AdvanceRunner, ResetPath, EditSegmentNote, EditNotes,
    ],
    Field(discriminator="action"),
]

_intent_adapter: TypeAdapter = TypeAdapter(CellIntent)

# Intents that only touch free text; allowed on cells past the third out.
TEXT_ONLY_INTENTS = (EditSegmentNote, EditNotes)


def parse_intent(payload: dict) -> CellIntent:
    """Validate a raw dict into an intent. Raises pydantic.ValidationError."""
    return _intent_adapter.validate_python(payload)


@dataclass
class CellUpdate:
    cell: Cell
    record_out: bool = False
    last_click: Optional[LastClick] = None


# ---------------------------------------------------------------------------
# Outcome <-> path derivations
# ---------------------------------------------------------------------------

def derive_auto_outcome(seq: list[PitchMark], current: Outcome) -> Optional[Outcome]:
    """Outcome implied by the count, or None when nothing new is triggered."""
    if strike_count(seq) >= STRIKEOUT_STRIKES:
        candidate = Outcome.STRIKEOUT
    elif has_dead_ball(seq):
        candidate = Outcome.HBP
    elif ball_count(seq) >= WALK_BALLS:
        candidate = Outcome.WALK
    else:
        return None
    return candidate if candidate != current else None


def opening_for_outcome(outcome: Outcome, batter_number: int) -> list[RunSegment]:
    """Leading segment a chosen outcome implies (empty for non-reaching outcomes)."""
    if outcome in HIT_OUTCOMES:
        return [RunSegment(
            from_base=0,
            to_base=HIT_OUTCOMES[outcome],
            kind=RunKind.HIT,
            caused_by_batter=batter_number,
        )]
    if outcome in AWARD_OUTCOMES:
        return [RunSegment(
            from_base=0,
            to_base=1,
            kind=RunKind.AWARD,
            award_type=AWARD_OUTCOMES[outcome],
            caused_by_batter=batter_number,
        )]
    return []


def outcome_from_path(path: list[RunSegment], previous: Outcome) -> Outcome:
    if path and path[0].is_opening:
        first = path[0]
        if first.kind == RunKind.HIT:
            return hit_outcome_for(first.to_base)
        if first.kind == RunKind.AWARD:
            return Outcome((first.award_type or AwardType.WALK).value)
    return previous


def apply_outcome(cell: Cell, outcome: Outcome, batter_number: int) -> Cell:
    path = replace_opening(cell.run_path, opening_for_outcome(outcome, batter_number))
    return cell.with_path(path, outcome=outcome)


def _with_derived_outcome(cell: Cell, path: list[RunSegment]) -> Cell:
    return cell.with_path(path, outcome=outcome_from_path(path, cell.outcome))


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------

PITCH_INTENTS = (SetPitches, AppendPitch, InsertPitch, RemovePitch, ReplacePitch, SwapPitches)


def _edited_sequence(seq: list[PitchMark], intent) -> list[PitchMark]:
    if isinstance(intent, SetPitches):
        return list(intent.sequence)
    if isinstance(intent, AppendPitch):
        return append_pitch(seq, intent.mark)
    if isinstance(intent, InsertPitch):
        return insert_pitch(seq, intent.index, intent.mark)
    if isinstance(intent, RemovePitch):
        return remove_pitch(seq, intent.index)
    if isinstance(intent, ReplacePitch):
        return replace_pitch(seq, intent.index, intent.mark)
    return swap_pitches(seq, intent.a, intent.b)


def _with_pitches(
    cell: Cell,
    seq: list[PitchMark],
    batter_number: int,
    last_click: Optional[LastClick],
) -> CellUpdate:
    # A strikeout leaves the path alone; walks and HBPs place the batter on first.
    auto = derive_auto_outcome(seq, cell.outcome)
    nxt = cell.model_copy(update={"pitch_sequence": seq})
    if auto == Outcome.STRIKEOUT:
        return CellUpdate(nxt.model_copy(update={"outcome": auto}), record_out=True, last_click=last_click)
    if auto in AWARD_OUTCOMES:
        nxt = apply_outcome(nxt, auto, batter_number)
    return CellUpdate(nxt, last_click=last_click)


def reduce_cell(
    cell: Cell,
    intent: CellIntent,
    batter_number: int,
    last_click: Optional[LastClick] = None,
) -> CellUpdate:
    """Compute the next state of *cell* for one scorer action."""
    if isinstance(intent, PITCH_INTENTS):
        seq = _edited_sequence(list(cell.pitch_sequence), intent)
        return _with_pitches(cell, seq, batter_number, last_click)

    if isinstance(intent, SelectOutcome):
        return CellUpdate(apply_outcome(cell, intent.outcome, batter_number), last_click=last_click)

    if isinstance(intent, AddRun):
        path, click = add_segment(
            cell.run_path,
            intent.kind,
            now=intent.at,
            last_click=last_click,
            caused_by=intent.caused_by if intent.caused_by is not None else batter_number,
            note=intent.note,
            award_type=intent.award_type,
        )
        return CellUpdate(_with_derived_outcome(cell, path), last_click=click)

    if isinstance(intent, AdvanceRunner):
        path = advance_runner(
            cell.run_path,
            intent.kind,
            intent.bases,
            caused_by=intent.caused_by,
            note=intent.note,
        )
        return CellUpdate(_with_derived_outcome(cell, path), last_click=None)

    if isinstance(intent, ResetPath):
        return CellUpdate(cell.with_path([], outcome=Outcome.NONE), last_click=None)

    if isinstance(intent, EditSegmentNote):
        path = update_segment_note(cell.run_path, intent.index, intent.note)
        return CellUpdate(cell.with_path(path), last_click=last_click)

    if isinstance(intent, EditNotes):
        return CellUpdate(cell.model_copy(update={"notes": intent.notes}), last_click=last_click)

    raise TypeError(f"Unsupported intent: {type(intent).__name__}")
