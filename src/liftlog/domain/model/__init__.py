"""Public domain model surface."""

from __future__ import annotations

from liftlog.domain.model.enums import ActionKind, WeightUnit
from liftlog.domain.model.payload import (
    MAX_PRIOR_SESSIONS,
    RawTagPayload,
    SessionRecord,
    SetRecord,
)
from liftlog.domain.model.session import ActiveSession
from liftlog.domain.model.workout import (
    MANUAL_MACHINE_PREFIX,
    MANUAL_MACHINE_TYPE,
    ExerciseSession,
    ExerciseSet,
    WorkoutSession,
    WorkoutSummary,
    find_open_workout,
    is_manual_machine,
    latest_session_for_machine,
    manual_exercise_name,
    manual_machine_id,
    new_id,
    summarize_workout,
)

__all__ = [
    "MANUAL_MACHINE_PREFIX",
    "MANUAL_MACHINE_TYPE",
    "MAX_PRIOR_SESSIONS",
    "ActionKind",
    "ActiveSession",
    "ExerciseSession",
    "ExerciseSet",
    "RawTagPayload",
    "SessionRecord",
    "SetRecord",
    "WeightUnit",
    "WorkoutSession",
    "WorkoutSummary",
    "find_open_workout",
    "is_manual_machine",
    "latest_session_for_machine",
    "manual_exercise_name",
    "manual_machine_id",
    "new_id",
    "summarize_workout",
]
