"""SQLAlchemy mapping metadata for the workout model."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from liftlog.domain.model import ExerciseSession, ExerciseSet, WorkoutSession

log = logging.getLogger(__name__)

ID_LENGTH = 32


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class ExerciseSetListType(TypeDecorator[list[ExerciseSet]]):
    """Ordered sets stored as a JSON array on the exercise session row."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[ExerciseSet] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = [
            {"weight_lbs": item.weight_lbs, "reps": item.reps, "duration_ms": item.duration_ms}
            for item in value
        ]
        return json.dumps(payload)

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[ExerciseSet]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[dict[str, Any]], loaded)
        return [
            ExerciseSet(
                weight_lbs=float(item["weight_lbs"]),
                reps=int(item["reps"]),
                duration_ms=int(item["duration_ms"]),
            )
            for item in items
        ]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

workout_table = Table(
    "workout",
    mapper_registry.metadata,
    Column("workout_id", String(ID_LENGTH), primary_key=True),
    Column("user_id", String, nullable=False, index=True),
    Column("started_at", UTCDateTime, nullable=False),
    Column("ended_at", UTCDateTime, nullable=True),
    Column("total_volume", Float, nullable=True),
    Column("total_sets", Integer, nullable=True),
)

exercise_session_table = Table(
    "exercise_session",
    mapper_registry.metadata,
    Column("session_id", String(ID_LENGTH), primary_key=True),
    Column(
        "workout_id",
        String(ID_LENGTH),
        ForeignKey("workout.workout_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("user_id", String, nullable=False),
    Column("machine_id", String, nullable=False),
    Column("machine_type", String, nullable=True),
    Column("started_at", UTCDateTime, nullable=False),
    Column("ended_at", UTCDateTime, nullable=False),
    Column("sets", ExerciseSetListType, nullable=False),
    # NULLs never collide, so manual entries without a tag id are unconstrained
    Column("tap_session_id", String, nullable=True),
    UniqueConstraint("workout_id", "tap_session_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the workout model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        WorkoutSession,
        workout_table,
        properties={
            "exercise_sessions": relationship(
                ExerciseSession,
                order_by=exercise_session_table.c.started_at,
                cascade="all, delete-orphan",
                lazy="selectin",
            ),
        },
    )

    mapper_registry.map_imperatively(
        ExerciseSession,
        exercise_session_table,
    )

    configure_mappers()
    return mapper_registry
