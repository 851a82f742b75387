"""Translate between workout domain objects and Firestore documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from liftlog.domain.model import ExerciseSession, ExerciseSet, WorkoutSession

from .codec import decode_fields, encode_fields
from .schema import ExerciseSessionDocument, WorkoutDocument

if TYPE_CHECKING:
    from liftlog.domain.model import WorkoutSummary


def document_id(name: str) -> str:
    """Last path segment of a full document resource name."""

    return name.rsplit("/", 1)[-1]


def workout_fields(workout: WorkoutSession) -> dict[str, dict[str, Any]]:
    return encode_fields(
        {
            "userId": workout.user_id,
            "startedAt": workout.started_at,
            "endedAt": workout.ended_at,
            "totalVolume": workout.total_volume,
            "totalSets": workout.total_sets,
        }
    )


def summary_fields(summary: WorkoutSummary) -> dict[str, dict[str, Any]]:
    return encode_fields(
        {
            "endedAt": summary.ended_at,
            "totalVolume": float(summary.total_volume),
            "totalSets": summary.total_sets,
        }
    )


def exercise_session_fields(session: ExerciseSession) -> dict[str, dict[str, Any]]:
    return encode_fields(
        {
            "userId": session.user_id,
            "workoutId": session.workout_id,
            "machineId": session.machine_id,
            "machineType": session.machine_type,
            "startedAt": session.started_at,
            "endedAt": session.ended_at,
            "sets": [
                {
                    "weightLbs": float(item.weight_lbs),
                    "reps": item.reps,
                    "durationMs": item.duration_ms,
                }
                for item in session.sets
            ],
            "tapSessionId": session.tap_session_id,
        }
    )


def parse_workout(document: Mapping[str, Any]) -> WorkoutSession:
    payload = WorkoutDocument.model_validate(decode_fields(document.get("fields") or {}))
    return WorkoutSession(
        workout_id=document_id(str(document["name"])),
        user_id=payload.user_id,
        started_at=payload.started_at,
        ended_at=payload.ended_at,
        total_volume=payload.total_volume,
        total_sets=payload.total_sets,
    )


def parse_exercise_session(document: Mapping[str, Any]) -> ExerciseSession:
    payload = ExerciseSessionDocument.model_validate(
        decode_fields(document.get("fields") or {})
    )
    return ExerciseSession(
        session_id=document_id(str(document["name"])),
        user_id=payload.user_id,
        workout_id=payload.workout_id,
        machine_id=payload.machine_id,
        machine_type=payload.machine_type,
        started_at=payload.started_at,
        ended_at=payload.ended_at,
        sets=[
            ExerciseSet(weight_lbs=item.weight_lbs, reps=item.reps, duration_ms=item.duration_ms)
            for item in payload.sets
        ],
        tap_session_id=payload.tap_session_id,
    )
