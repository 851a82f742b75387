"""``WorkoutStore`` implementation on top of the SQLAlchemy unit of work.

Calls run synchronously on the event loop; the store targets a local SQLite
file where each call is a single short transaction.
"""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from liftlog.adapters.sqlalchemy.unit_of_work import SqlAlchemyWorkoutUnitOfWork
from liftlog.domain.model import WorkoutSession, new_id
from liftlog.domain.tap_sessions import PersistenceFailed

if TYPE_CHECKING:
    from collections.abc import Callable

    from liftlog.domain.model import ExerciseSession, WorkoutSummary

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SqlAlchemyWorkoutStore:
    def __init__(
        self,
        *,
        unit_of_work_factory: Callable[[], SqlAlchemyWorkoutUnitOfWork] = (
            SqlAlchemyWorkoutUnitOfWork
        ),
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._now = now

    async def create_workout(self, user_id: str) -> WorkoutSession:
        workout = WorkoutSession(workout_id=new_id(), user_id=user_id, started_at=self._now())
        try:
            with self._unit_of_work_factory() as uow:
                uow.repositories.workouts.add(workout)
                uow.commit()
        except SQLAlchemyError as exc:
            raise PersistenceFailed(
                f"Could not create workout for user {user_id}", operation="create_workout"
            ) from exc
        log.debug("Stored workout %s", workout.workout_id)
        return workout

    async def complete_workout(self, workout_id: str, summary: WorkoutSummary) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                workout = uow.repositories.workouts.get(workout_id)
                if workout is None:
                    raise PersistenceFailed(
                        f"Unknown workout {workout_id}", operation="complete_workout"
                    )
                workout.ended_at = summary.ended_at
                workout.total_volume = summary.total_volume
                workout.total_sets = summary.total_sets
                uow.commit()
        except SQLAlchemyError as exc:
            raise PersistenceFailed(
                f"Could not complete workout {workout_id}", operation="complete_workout"
            ) from exc

    async def append_exercise_session(
        self, workout_id: str, session: ExerciseSession
    ) -> ExerciseSession:
        try:
            with self._unit_of_work_factory() as uow:
                workout = uow.repositories.workouts.get(workout_id)
                if workout is None:
                    raise PersistenceFailed(
                        f"Unknown workout {workout_id}", operation="append_exercise_session"
                    )
                if session.tap_session_id is not None:
                    existing = uow.repositories.exercise_sessions.find_by_tap_session(
                        workout_id, session.tap_session_id
                    )
                    if existing is not None:
                        log.info(
                            "Session %s already stored in workout %s",
                            session.tap_session_id,
                            workout_id,
                        )
                        return existing
                session.workout_id = workout_id
                if session.session_id is None:
                    session.session_id = new_id()
                workout.exercise_sessions.append(session)
                uow.commit()
        except SQLAlchemyError as exc:
            raise PersistenceFailed(
                f"Could not save exercise session to workout {workout_id}",
                operation="append_exercise_session",
            ) from exc
        return session

    async def list_workout_history(self, user_id: str) -> list[WorkoutSession]:
        """Return the user's workouts, newest first, with their exercise sessions."""

        try:
            with self._unit_of_work_factory() as uow:
                return uow.repositories.workouts.list_for_user(user_id)
        except SQLAlchemyError as exc:
            raise PersistenceFailed(
                f"Could not load workout history for user {user_id}",
                operation="list_workout_history",
            ) from exc
