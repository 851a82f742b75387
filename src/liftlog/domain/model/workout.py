"""Workout aggregates owned by the persistent store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


def new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True, kw_only=True)
class ExerciseSet:
    weight_lbs: float
    reps: int
    duration_ms: int

    @property
    def volume(self) -> float:
        return self.weight_lbs * self.reps


@dataclass(eq=False, kw_only=True)
class ExerciseSession:
    """One completed set-group on a machine.

    Immutable once persisted; edits produce a full replacement object.
    ``tap_session_id`` is the tag's session id and doubles as the idempotency
    key for stores.
    """

    user_id: str
    workout_id: str
    machine_id: str
    started_at: datetime
    ended_at: datetime
    machine_type: str | None = None
    sets: list[ExerciseSet] = field(default_factory=list[ExerciseSet])
    session_id: str | None = None
    tap_session_id: str | None = None

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def total_volume(self) -> float:
        return sum(exercise_set.volume for exercise_set in self.sets)


@dataclass(eq=False, kw_only=True)
class WorkoutSession:
    workout_id: str
    user_id: str
    started_at: datetime
    ended_at: datetime | None = None
    total_volume: float | None = None
    total_sets: int | None = None
    exercise_sessions: list[ExerciseSession] = field(default_factory=list[ExerciseSession])

    @property
    def is_open(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True, slots=True, kw_only=True)
class WorkoutSummary:
    ended_at: datetime
    total_volume: float
    total_sets: int


def summarize_workout(
    sessions: Iterable[ExerciseSession], *, ended_at: datetime
) -> WorkoutSummary:
    """Aggregate volume (lbs x reps) and set count over ``sessions``."""

    total_volume = 0.0
    total_sets = 0
    for session in sessions:
        total_volume += session.total_volume
        total_sets += session.set_count
    return WorkoutSummary(ended_at=ended_at, total_volume=total_volume, total_sets=total_sets)


def find_open_workout(workouts: Iterable[WorkoutSession]) -> WorkoutSession | None:
    for workout in workouts:
        if workout.is_open:
            return workout
    return None


def latest_session_for_machine(
    workouts: Iterable[WorkoutSession], machine_id: str
) -> ExerciseSession | None:
    """Most recently started session on ``machine_id`` across ``workouts``."""

    sessions = [
        session
        for workout in workouts
        for session in workout.exercise_sessions
        if session.machine_id == machine_id
    ]
    if not sessions:
        return None
    return max(sessions, key=lambda session: session.started_at)


MANUAL_MACHINE_PREFIX = "manual-"
MANUAL_MACHINE_TYPE = "manual"


def manual_machine_id(exercise_name: str) -> str:
    """Machine id under which sets logged by hand for ``exercise_name`` are stored."""

    words = exercise_name.lower().split()
    if not words:
        raise ValueError("Exercise name must not be blank")
    return MANUAL_MACHINE_PREFIX + "-".join(words)


def is_manual_machine(machine_id: str) -> bool:
    return machine_id.startswith(MANUAL_MACHINE_PREFIX)


def manual_exercise_name(machine_id: str) -> str:
    """Display name recovered from a manual machine id (``manual-leg-curl`` -> ``Leg Curl``)."""

    words = machine_id.removeprefix(MANUAL_MACHINE_PREFIX).split("-")
    return " ".join(word[:1].upper() + word[1:] for word in words if word)
