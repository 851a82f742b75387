"""Reusable fakes and payload builders for tap-session tests."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from liftlog.domain.model import WorkoutSession
from liftlog.domain.tap_sessions import PersistenceFailed

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from liftlog.domain.model import ExerciseSession, WorkoutSummary

USER_ID = "user-1"
MACHINE_ID = "machine-001"
MACHINE_NAME = "Lat Pulldown"
START_UNIX = 1_725_721_215
END_UNIX = 1_725_721_575


def make_sets(*sets: tuple[float, int]) -> list[dict[str, Any]]:
    """Canonical set dicts from ``(weight_lbs, reps)`` pairs."""

    return [
        {"weightLbs": weight, "reps": reps, "durationMs": 30_000} for weight, reps in sets
    ]


def session_data(
    sets: Sequence[tuple[float, int]] = ((80, 10), (80, 10), (80, 10)),
    *,
    start: int = START_UNIX,
    end: int = END_UNIX,
) -> dict[str, Any]:
    return {"startedAtUnix": start, "endedAtUnix": end, "sets": make_sets(*sets)}


def canonical_payload(
    current: str,
    *,
    prior_ids: Iterable[str] = (),
    prior_data: dict[str, dict[str, Any]] | None = None,
    machine_id: str = MACHINE_ID,
    machine_name: str | None = MACHINE_NAME,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "version": 1,
        "machineId": machine_id,
        "currentSessionId": current,
        "priorSessionIds": list(prior_ids),
        "priorSessionData": prior_data or {},
        "firmwareVersion": "1.2.0",
    }
    if machine_name is not None:
        payload["machineName"] = machine_name
    return payload


def encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


def tap_in(current: str, **kwargs: Any) -> bytes:
    return encode(canonical_payload(current, **kwargs))


def tap_out(
    current: str,
    finished: str,
    *,
    sets: Sequence[tuple[float, int]] | None = ((80, 10), (80, 10), (80, 10)),
    **kwargs: Any,
) -> bytes:
    prior_data = {finished: session_data(sets)} if sets is not None else {}
    return encode(
        canonical_payload(current, prior_ids=[finished], prior_data=prior_data, **kwargs)
    )


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


@dataclass(frozen=True, slots=True)
class FixedIdentity:
    user_id: str = USER_ID


@dataclass
class FakeWorkoutStore:
    """In-memory ``WorkoutStore`` with failure injection and an optional gate."""

    workouts: dict[str, WorkoutSession] = field(default_factory=dict[str, WorkoutSession])
    calls: list[str] = field(default_factory=list[str])
    fail_on: set[str] = field(default_factory=set[str])
    gate: asyncio.Event | None = None
    _counter: int = 0

    async def create_workout(self, user_id: str) -> WorkoutSession:
        await self._enter("create_workout")
        self._counter += 1
        workout = WorkoutSession(
            workout_id=f"workout-{self._counter}",
            user_id=user_id,
            started_at=datetime(2025, 9, 7, 14, self._counter, tzinfo=UTC),
        )
        self.workouts[workout.workout_id] = workout
        return workout

    async def complete_workout(self, workout_id: str, summary: WorkoutSummary) -> None:
        await self._enter("complete_workout")
        workout = self.workouts[workout_id]
        workout.ended_at = summary.ended_at
        workout.total_volume = summary.total_volume
        workout.total_sets = summary.total_sets

    async def append_exercise_session(
        self, workout_id: str, session: ExerciseSession
    ) -> ExerciseSession:
        await self._enter("append_exercise_session")
        workout = self.workouts[workout_id]
        if session.tap_session_id is not None:
            for existing in workout.exercise_sessions:
                if existing.tap_session_id == session.tap_session_id:
                    return existing
        session.session_id = f"exercise-{len(workout.exercise_sessions) + 1}"
        workout.exercise_sessions.append(session)
        return session

    async def list_workout_history(self, user_id: str) -> list[WorkoutSession]:
        await self._enter("list_workout_history")
        return sorted(
            (workout for workout in self.workouts.values() if workout.user_id == user_id),
            key=lambda workout: workout.started_at,
            reverse=True,
        )

    @property
    def exercise_sessions(self) -> list[ExerciseSession]:
        return [
            session
            for workout in self.workouts.values()
            for session in workout.exercise_sessions
        ]

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.gate is not None:
            await self.gate.wait()
        if operation in self.fail_on:
            raise PersistenceFailed(f"{operation} failed", operation=operation)
