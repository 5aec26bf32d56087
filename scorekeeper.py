# /// script
# requires-python = ">=3.12"
# dependencies = [
#     "anthropic>=0.78.0",
#     "pydantic>=2.0",
# ]
# ///
"""Command-line scorekeeper.

Usage:
    uv run scorekeeper.py --demo
    uv run scorekeeper.py --team away --box-score
    uv run scorekeeper.py --team home --export exports/
    uv run scorekeeper.py --team home --import exports/Home_Team_scorecard.json
    uv run scorekeeper.py --report exports/Home_Team_scorecard.json --locale zh --notes "Road game"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from cell_reducer import AdvanceRunner, AppendPitch, SelectOutcome, SetPitches
from config import enforce_inning_end, get_store_dir
from data.store import JsonStore
from export import format_box_score, format_plate_appearances, load_export, write_export
from ingestion import ScorecardImportError
from models import Outcome, PitchMark, RunKind, TeamKey
from report import ReportError, generate_report
from scorecard import TeamScorecard

logger = logging.getLogger(__name__)


def score_demo_inning(scorecard: TeamScorecard, col: int = 0) -> TeamScorecard:
    """Score a sample three-run half inning in column *col*."""
    B, CS, SS, F = PitchMark.BALL, PitchMark.CALLED_STRIKE, PitchMark.SWINGING_STRIKE, PitchMark.FOUL

    # 1: single
    scorecard.apply(0, col, SetPitches(sequence=[B, CS, F, B]))
    scorecard.apply(0, col, SelectOutcome(outcome=Outcome.SINGLE))
    # 2: strikes out swinging on a foul-extended count, pitch by pitch
    for mark in (SS, SS, F, SS):
        scorecard.apply(1, col, AppendPitch(mark=mark))
    # 3: double, runner from first to third
    scorecard.apply(2, col, SetPitches(sequence=[CS, B]))
    scorecard.apply(2, col, SelectOutcome(outcome=Outcome.DOUBLE))
    scorecard.apply(0, col, AdvanceRunner(kind=RunKind.HIT, bases=2, caused_by=3))
    # 4: home run clears the bases
    scorecard.apply(3, col, SetPitches(sequence=[B]))
    scorecard.apply(3, col, SelectOutcome(outcome=Outcome.HOME_RUN))
    scorecard.apply(0, col, AdvanceRunner(kind=RunKind.HIT, bases=1, caused_by=4))
    scorecard.apply(2, col, AdvanceRunner(kind=RunKind.HIT, bases=2, caused_by=4))
    # 5: ground out
    scorecard.apply(4, col, SetPitches(sequence=[F]))
    scorecard.apply(4, col, SelectOutcome(outcome=Outcome.OUT))
    scorecard.record_out(4, col)
    # 6: four balls
    scorecard.apply(5, col, SetPitches(sequence=[B, B, CS, B, B]))
    # 7: fly out ends the inning
    scorecard.apply(6, col, SetPitches(sequence=[CS]))
    scorecard.apply(6, col, SelectOutcome(outcome=Outcome.OUT))
    scorecard.record_out(6, col)
    return scorecard


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Keep a baseball scorecard from the command line."
    )
    parser.add_argument(
        "--team", choices=[t.value for t in TeamKey], default=TeamKey.HOME.value,
        help="Team scorecard to work on (default: home).",
    )
    parser.add_argument(
        "--store", type=Path, default=None, metavar="DIR",
        help="Scorecard store directory (default: $SCORECARD_STORE_DIR or data/scorecards).",
    )
    parser.add_argument(
        "--demo", action="store_true",
        help="Score a sample half inning (not saved) and print the results.",
    )
    parser.add_argument(
        "--box-score", action="store_true",
        help="Print the saved team's box score and plate appearances.",
    )
    parser.add_argument(
        "--export", type=Path, default=None, metavar="DIR",
        help="Write the saved team's scorecard JSON into DIR.",
    )
    parser.add_argument(
        "--import", dest="import_file", type=Path, default=None, metavar="FILE",
        help="Replace the saved team's scorecard with an exported document.",
    )
    parser.add_argument(
        "--report", type=Path, default=None, metavar="FILE",
        help="Generate a markdown game report for an exported scorecard.",
    )
    parser.add_argument("--notes", default="", help="Extra context for --report.")
    parser.add_argument("--locale", choices=["en", "zh"], default="en", help="Report language.")
    parser.add_argument("--verbose", action="store_true", help="Log debug output.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if args.demo:
        scorecard = score_demo_inning(TeamScorecard(team_name="Demo Nine"))
        print(format_box_score(scorecard))
        print()
        print(format_plate_appearances(scorecard))
        return 0

    if args.report is not None:
        try:
            text = generate_report(args.report.read_text(encoding="utf-8"),
                                   notes=args.notes, locale=args.locale)
        except OSError as e:
            print(f"Error reading {args.report}: {e}", file=sys.stderr)
            return 1
        except ReportError as e:
            print(f"Error ({e.status_code}): {e}", file=sys.stderr)
            return 1
        print(text)
        return 0

    store = JsonStore(args.store or get_store_dir())
    team = TeamKey(args.team)
    enforce = enforce_inning_end()

    if args.import_file is not None:
        try:
            scorecard = load_export(args.import_file.read_text(encoding="utf-8"), enforce)
        except (OSError, ScorecardImportError) as e:
            print(f"Error importing {args.import_file}: {e}", file=sys.stderr)
            return 1
        scorecard.save(store, team)
        print(f"Imported {scorecard.team_name} into the {team.value} scorecard")

    scorecard = TeamScorecard.load(store, team, enforce)

    if args.export is not None:
        path = write_export(scorecard, args.export)
        print(f"Scorecard written to: {path}")

    if args.box_score or (args.export is None and args.import_file is None):
        print(format_box_score(scorecard))
        plays = format_plate_appearances(scorecard)
        if plays:
            print()
            print(plays)
    return 0


if __name__ == "__main__":
    sys.exit(main())
