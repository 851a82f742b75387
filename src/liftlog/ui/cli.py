# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from liftlog.adapters.identity import StaticIdentityProvider
from liftlog.adapters.notifications import ConsoleNotifier
from liftlog.adapters.tag_readers import MOCK_MACHINES, describe_machine
from liftlog.app import (
    last_machine_session,
    list_history,
    parse_payload_file,
    record_manual_exercise,
    replay_tags,
    simulate_workout,
)
from liftlog.config import configure_logging, get_identity_config
from liftlog.domain.model import ExerciseSet, WeightUnit
from liftlog.domain.tap_sessions import MalformedPayload
from liftlog.domain.weight import format_weight, parse_weight_input

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from liftlog.domain.model import ExerciseSession, WorkoutSession

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track machine workouts from NFC tag taps")
    parser.add_argument(
        "--backend",
        choices=("sqlite", "firestore"),
        default="sqlite",
        help="Workout store to use (default: %(default)s)",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        help="User to record workouts for (defaults to LIFTLOG_USER_ID)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay recorded tag payloads")
    replay.add_argument("file", type=str, help="File with one JSON tag payload per line")
    replay.add_argument(
        "--interval",
        type=float,
        default=0.0,
        help="Seconds to wait between taps (default: %(default)s)",
    )
    replay.add_argument(
        "--timeout-ms",
        type=int,
        help="Session timeout in milliseconds (defaults to LIFTLOG_SESSION_TIMEOUT_MS)",
    )

    simulate = subparsers.add_parser("simulate", help="Simulate a workout on mock machines")
    simulate.add_argument(
        "--machine",
        type=int,
        action="append",
        dest="machines",
        choices=range(len(MOCK_MACHINES)),
        help="Index of a mock machine to use; repeat for several (default: 0 and 1)",
    )
    simulate.add_argument(
        "--sets",
        type=int,
        default=3,
        help="Sets to lift per machine (default: %(default)s)",
    )
    simulate.add_argument(
        "--keep-open",
        action="store_true",
        help="Leave the workout open instead of ending it",
    )

    parse = subparsers.add_parser("parse", help="Validate a tag payload file")
    parse.add_argument("file", type=str, help="File holding one JSON tag payload")

    history = subparsers.add_parser("history", help="List recorded workouts")
    history.add_argument(
        "--unit",
        choices=[unit.value for unit in WeightUnit],
        default=WeightUnit.LBS.value,
        help="Weight unit for display (default: %(default)s)",
    )
    history.add_argument(
        "--limit",
        type=int,
        help="Show at most this many workouts",
    )

    manual = subparsers.add_parser("manual", help="Log sets for an exercise without a tag")
    manual.add_argument("name", type=str, help="Exercise name, e.g. 'Bench Press'")
    manual.add_argument(
        "--set",
        type=_set_spec,
        action="append",
        dest="sets",
        required=True,
        metavar="WEIGHT:REPS",
        help="One lifted set; repeat for several",
    )
    manual.add_argument(
        "--unit",
        choices=[unit.value for unit in WeightUnit],
        default=WeightUnit.LBS.value,
        help="Unit the weights are given in (default: %(default)s)",
    )

    last = subparsers.add_parser("last", help="Show the previous session on a machine")
    last.add_argument("machine_id", type=str, help="Machine id, e.g. machine-001")
    last.add_argument(
        "--unit",
        choices=[unit.value for unit in WeightUnit],
        default=WeightUnit.LBS.value,
        help="Weight unit for display (default: %(default)s)",
    )

    args = parser.parse_args(list(argv))
    if args.command == "simulate" and args.sets < 0:
        raise ValueError("--sets must be non-negative")
    if getattr(args, "interval", 0.0) < 0:
        raise ValueError("--interval must be non-negative")
    return args


def _set_spec(text: str) -> tuple[str, int]:
    weight, sep, reps = text.partition(":")
    if not sep or not weight.strip():
        raise argparse.ArgumentTypeError(f"expected WEIGHT:REPS, got {text!r}")
    try:
        reps_count = int(reps)
    except ValueError:
        raise argparse.ArgumentTypeError(f"reps must be a whole number, got {reps!r}") from None
    if reps_count < 0:
        raise argparse.ArgumentTypeError("reps must be non-negative")
    return weight, reps_count


def _machine_label(machine_id: str) -> str:
    machine = describe_machine(machine_id)
    return machine.machine_name if machine is not None else machine_id


def _format_sets(session: ExerciseSession, unit: WeightUnit) -> str:
    return ", ".join(
        f"{format_weight(item.weight_lbs, unit)} x {item.reps}" for item in session.sets
    )


def _print_workouts(workouts: Sequence[WorkoutSession], unit: WeightUnit) -> None:
    if not workouts:
        print("No workouts recorded")
        return
    for workout in workouts:
        status = "open" if workout.is_open else f"ended {workout.ended_at:%Y-%m-%d %H:%M}"
        print(f"{workout.started_at:%Y-%m-%d %H:%M}  {workout.workout_id}  ({status})")
        for session in workout.exercise_sessions:
            print(f"    {_machine_label(session.machine_id)}: {_format_sets(session, unit)}")
        if workout.total_sets is not None and workout.total_volume is not None:
            print(
                f"    total: {workout.total_sets} sets, "
                f"{format_weight(workout.total_volume, unit)}"
            )


def _run(args: argparse.Namespace) -> int:
    if args.command == "parse":
        try:
            payload = parse_payload_file(args.file)
        except MalformedPayload as exc:
            print(f"Invalid tag payload: {exc}", file=sys.stderr)
            return 1
        print(json.dumps(asdict(payload), indent=2))
        return 0

    identity = StaticIdentityProvider(get_identity_config(user_id=args.user_id).user_id)

    if args.command == "replay":
        result = asyncio.run(
            replay_tags(
                args.file,
                backend=args.backend,
                identity=identity,
                notifier=ConsoleNotifier(),
                timeout_ms=args.timeout_ms,
                interval_s=args.interval,
            )
        )
        print(
            f"Processed {result.processed} tags "
            f"({result.rejected} rejected, {result.failed} failed)"
        )
        return 1 if result.failed else 0

    if args.command == "simulate":
        indices = args.machines or [0, 1]
        summary = asyncio.run(
            simulate_workout(
                machines=[MOCK_MACHINES[index] for index in indices],
                sets_per_session=args.sets,
                end_workout=not args.keep_open,
                backend=args.backend,
                identity=identity,
                notifier=ConsoleNotifier(),
            )
        )
        if summary is not None:
            print(
                f"Workout summary: {summary.total_sets} sets, "
                f"{format_weight(summary.total_volume, WeightUnit.LBS)}"
            )
        return 0

    if args.command == "history":
        workouts = asyncio.run(list_history(backend=args.backend, user_id=identity.user_id))
        if args.limit is not None:
            workouts = workouts[: args.limit]
        _print_workouts(workouts, WeightUnit(args.unit))
        return 0

    if args.command == "manual":
        unit = WeightUnit(args.unit)
        sets = [
            ExerciseSet(weight_lbs=parse_weight_input(weight, unit), reps=reps, duration_ms=0)
            for weight, reps in args.sets
        ]
        session = asyncio.run(
            record_manual_exercise(
                args.name,
                sets,
                backend=args.backend,
                identity=identity,
                notifier=ConsoleNotifier(),
            )
        )
        print(f"{_machine_label(session.machine_id)}: {_format_sets(session, WeightUnit.LBS)}")
        return 0

    if args.command == "last":
        session = asyncio.run(
            last_machine_session(args.machine_id, backend=args.backend, identity=identity)
        )
        if session is None:
            print(f"No sessions recorded on {_machine_label(args.machine_id)}")
            return 0
        print(
            f"{_machine_label(session.machine_id)} on {session.started_at:%Y-%m-%d %H:%M}: "
            f"{_format_sets(session, WeightUnit(args.unit))}"
        )
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _run(parsed_args)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
