"""Pydantic models for decoded Firestore workout documents."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt


class FirestoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SetDocument(FirestoreBaseModel):
    weight_lbs: NonNegativeFloat = Field(alias="weightLbs")
    reps: NonNegativeInt
    duration_ms: NonNegativeInt = Field(alias="durationMs")


class ExerciseSessionDocument(FirestoreBaseModel):
    user_id: str = Field(alias="userId")
    workout_id: str = Field(alias="workoutId")
    machine_id: str = Field(alias="machineId")
    machine_type: str | None = Field(default=None, alias="machineType")
    started_at: datetime = Field(alias="startedAt")
    ended_at: datetime = Field(alias="endedAt")
    sets: list[SetDocument] = Field(default_factory=list[SetDocument])
    tap_session_id: str | None = Field(default=None, alias="tapSessionId")


class WorkoutDocument(FirestoreBaseModel):
    user_id: str = Field(alias="userId")
    started_at: datetime = Field(alias="startedAt")
    ended_at: datetime | None = Field(default=None, alias="endedAt")
    total_volume: float | None = Field(default=None, alias="totalVolume")
    total_sets: int | None = Field(default=None, alias="totalSets")
