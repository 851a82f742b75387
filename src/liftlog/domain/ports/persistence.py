"""Ports for persisting workouts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from liftlog.domain.model import ExerciseSession, WorkoutSession, WorkoutSummary


@runtime_checkable
class WorkoutStore(Protocol):
    """Durable workout storage.

    Implementations assign opaque string ids, treat each call as atomic and raise
    ``PersistenceFailed`` when a call cannot be completed.
    """

    async def create_workout(self, user_id: str) -> WorkoutSession: ...

    async def complete_workout(self, workout_id: str, summary: WorkoutSummary) -> None: ...

    async def append_exercise_session(
        self, workout_id: str, session: ExerciseSession
    ) -> ExerciseSession: ...

    async def list_workout_history(self, user_id: str) -> list[WorkoutSession]: ...
