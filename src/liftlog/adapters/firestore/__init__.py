"""Cloud Firestore adapter."""

from __future__ import annotations

from .codec import decode_fields, decode_value, encode_fields, encode_value
from .store import EXERCISE_SESSIONS, WORKOUTS, FirestoreWorkoutStore, exercise_document_id

__all__ = [
    "EXERCISE_SESSIONS",
    "WORKOUTS",
    "FirestoreWorkoutStore",
    "decode_fields",
    "decode_value",
    "encode_fields",
    "encode_value",
    "exercise_document_id",
]
