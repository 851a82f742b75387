from __future__ import annotations

import asyncio
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING

from liftlog.adapters.sqlalchemy import SqlAlchemyWorkoutStore
from liftlog.adapters.tag_readers import MOCK_MACHINES
from liftlog.app import (
    build_store,
    last_machine_session,
    list_history,
    parse_payload_file,
    record_manual_exercise,
    replay_tags,
    simulate_workout,
)
from liftlog.domain.model import ExerciseSet
from tests.helpers.workouts import (
    USER_ID,
    FakeWorkoutStore,
    FixedIdentity,
    RecordingNotifier,
    tap_in,
    tap_out,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def _write_lines(path: Path, *lines: bytes | str) -> Path:
    text = "\n".join(line.decode("utf-8") if isinstance(line, bytes) else line for line in lines)
    path.write_text(text + "\n", encoding="utf-8")
    return path


def test_replay_tags_counts_outcomes(
    tmp_path: Path,
    store: FakeWorkoutStore,
    identity: FixedIdentity,
    notifier: RecordingNotifier,
) -> None:
    recording = _write_lines(
        tmp_path / "taps.jsonl",
        "# morning session",
        tap_in("s1"),
        tap_in("s1"),
        "not json",
        tap_out("s2", "s1"),
        tap_in("s3", machine_id="machine-002", machine_name="Cable Row"),
    )

    result = asyncio.run(
        replay_tags(
            recording, store=store, identity=identity, notifier=notifier, timeout_ms=60_000
        )
    )

    assert result.processed == 5
    assert result.rejected == 1
    assert result.failed == 0
    assert result.actions == {"start": 2, "ignore": 1, "complete": 1}
    [session] = store.exercise_sessions
    assert session.tap_session_id == "s1"
    assert len(session.sets) == 3
    assert "Invalid tag data" in notifier.messages
    assert "Started session on Cable Row" in notifier.messages


def test_replay_tags_counts_store_failures(
    tmp_path: Path,
    store: FakeWorkoutStore,
    identity: FixedIdentity,
    notifier: RecordingNotifier,
) -> None:
    store.fail_on.add("append_exercise_session")
    recording = _write_lines(tmp_path / "taps.jsonl", tap_in("s1"), tap_out("s2", "s1"))

    result = asyncio.run(
        replay_tags(
            recording, store=store, identity=identity, notifier=notifier, timeout_ms=60_000
        )
    )

    assert result.processed == 2
    assert result.failed == 1
    assert result.actions == {"start": 1}
    assert "Failed to save workout data" in notifier.messages
    assert store.exercise_sessions == []


def test_simulate_workout_records_every_machine(
    store: FakeWorkoutStore, identity: FixedIdentity, notifier: RecordingNotifier
) -> None:
    summary = asyncio.run(
        simulate_workout(
            machines=MOCK_MACHINES[:2],
            sets_per_session=3,
            store=store,
            identity=identity,
            notifier=notifier,
            timeout_ms=60_000,
        )
    )

    assert summary is not None
    assert summary.total_sets == 6
    # (80 x 12 + 85 x 10 + 90 x 8) per machine
    assert summary.total_volume == 5060
    assert [session.machine_id for session in store.exercise_sessions] == [
        "machine-001",
        "machine-002",
    ]
    [workout] = store.workouts.values()
    assert not workout.is_open
    assert notifier.messages[-1] == "Workout complete: 6 sets, 5060 lbs"


def test_simulate_workout_can_leave_workout_open(
    store: FakeWorkoutStore, identity: FixedIdentity, notifier: RecordingNotifier
) -> None:
    summary = asyncio.run(
        simulate_workout(
            machines=MOCK_MACHINES[2:3],
            sets_per_session=1,
            end_workout=False,
            store=store,
            identity=identity,
            notifier=notifier,
            timeout_ms=60_000,
        )
    )

    assert summary is None
    [workout] = store.workouts.values()
    assert workout.is_open
    assert "complete_workout" not in store.calls


def test_parse_payload_file(tmp_path: Path) -> None:
    path = tmp_path / "tag.json"
    path.write_bytes(tap_out("s2", "s1"))

    payload = parse_payload_file(path)

    assert payload.current_session_id == "s2"
    assert payload.prior_session_ids == ("s1",)
    assert len(payload.prior_session_data["s1"].sets) == 3


def test_list_history_uses_given_store(store: FakeWorkoutStore) -> None:
    asyncio.run(store.create_workout(USER_ID))
    asyncio.run(store.create_workout("someone-else"))

    workouts = asyncio.run(list_history(store=store, user_id=USER_ID))

    assert [workout.user_id for workout in workouts] == [USER_ID]


def test_build_store_reuses_started_database(started_sqlite: Engine) -> None:
    _ = started_sqlite

    assert isinstance(build_store("sqlite"), SqlAlchemyWorkoutStore)


def test_manual_exercise_lands_in_open_workout(
    store: FakeWorkoutStore, identity: FixedIdentity, notifier: RecordingNotifier
) -> None:
    sets = [ExerciseSet(weight_lbs=135, reps=5, duration_ms=0)] * 2

    first = asyncio.run(
        record_manual_exercise(
            "Bench Press", sets, store=store, identity=identity, notifier=notifier
        )
    )
    second = asyncio.run(
        record_manual_exercise(
            "  bench press ", sets[:1], store=store, identity=identity, notifier=notifier
        )
    )

    assert first.machine_id == second.machine_id == "manual-bench-press"
    [workout] = store.workouts.values()
    assert [session.set_count for session in workout.exercise_sessions] == [2, 1]
    assert notifier.messages == [
        "Saved workout: 2 sets on Bench Press",
        "Saved workout: 1 sets on bench press",
    ]


def test_last_machine_session_reads_history(
    store: FakeWorkoutStore, identity: FixedIdentity, notifier: RecordingNotifier
) -> None:
    asyncio.run(
        simulate_workout(
            machines=MOCK_MACHINES[:1],
            sets_per_session=2,
            store=store,
            identity=identity,
            notifier=notifier,
            timeout_ms=60_000,
        )
    )

    session = asyncio.run(last_machine_session("machine-001", store=store, identity=identity))
    missing = asyncio.run(last_machine_session("machine-004", store=store, identity=identity))

    assert session is not None
    assert session.set_count == 2
    assert missing is None
