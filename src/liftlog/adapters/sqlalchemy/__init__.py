"""SQLAlchemy adapter package for liftlog."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import SqlAlchemyExerciseSessionRepository, SqlAlchemyWorkoutRepository
from .store import SqlAlchemyWorkoutStore
from .unit_of_work import SqlAlchemyWorkoutUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyExerciseSessionRepository",
    "SqlAlchemyWorkoutRepository",
    "SqlAlchemyWorkoutStore",
    "SqlAlchemyWorkoutUnitOfWork",
    "StartupError",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
