"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from liftlog.adapters.sqlalchemy.mappings import exercise_session_table, workout_table
from liftlog.domain.model import ExerciseSession, WorkoutSession

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyWorkoutRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, workout: WorkoutSession) -> None:
        self.session.add(workout)

    def get(self, workout_id: str) -> WorkoutSession | None:
        return self.session.get(WorkoutSession, workout_id)

    def list_for_user(self, user_id: str) -> list[WorkoutSession]:
        stmt = (
            select(WorkoutSession)
            .where(workout_table.c.user_id == user_id)
            .order_by(workout_table.c.started_at.desc())
        )
        return list(self.session.execute(stmt).scalars().all())


class SqlAlchemyExerciseSessionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_tap_session(
        self, workout_id: str, tap_session_id: str
    ) -> ExerciseSession | None:
        stmt = (
            select(ExerciseSession)
            .where(exercise_session_table.c.workout_id == workout_id)
            .where(exercise_session_table.c.tap_session_id == tap_session_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()
