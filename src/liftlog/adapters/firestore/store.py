"""``WorkoutStore`` backed by the Cloud Firestore REST API.

Documents live in two top-level collections, ``workouts`` and
``exerciseSessions``. Ids are chosen client-side so a retried create hits
``ALREADY_EXISTS`` instead of writing a second document.
"""

from __future__ import annotations

import re
from collections import defaultdict
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

import httpx
from pydantic import ValidationError

from liftlog.adapters.http_resilience import ResilientClient
from liftlog.domain.model import WorkoutSession, new_id
from liftlog.domain.tap_sessions import PersistenceFailed

from .translator import (
    exercise_session_fields,
    parse_exercise_session,
    parse_workout,
    summary_fields,
    workout_fields,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from liftlog.config import FirestoreConfig
    from liftlog.domain.model import ExerciseSession, WorkoutSummary

log = getLogger(__name__)

WORKOUTS = "workouts"
EXERCISE_SESSIONS = "exerciseSessions"

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def exercise_document_id(workout_id: str, tap_session_id: str | None) -> str:
    """Deterministic document id for a tag session inside a workout."""

    if tap_session_id is None:
        return new_id()
    return f"{workout_id}-{_UNSAFE_ID_CHARS.sub('_', tap_session_id)}"


class FirestoreWorkoutStore:
    def __init__(
        self,
        config: FirestoreConfig,
        *,
        client: ResilientClient | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config = config
        self._client = client or ResilientClient(config.resilience)
        self._now = now

    async def __aenter__(self) -> FirestoreWorkoutStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---------- WorkoutStore ----------
    async def create_workout(self, user_id: str) -> WorkoutSession:
        workout = WorkoutSession(workout_id=new_id(), user_id=user_id, started_at=self._now())
        try:
            await self._create_document(WORKOUTS, workout.workout_id, workout_fields(workout))
        except httpx.HTTPError as exc:
            raise PersistenceFailed(
                f"Could not create workout for user {user_id}", operation="create_workout"
            ) from exc
        return workout

    async def complete_workout(self, workout_id: str, summary: WorkoutSummary) -> None:
        fields = summary_fields(summary)
        params: list[tuple[str, str]] = [
            ("updateMask.fieldPaths", path) for path in fields
        ]
        params.append(("currentDocument.exists", "true"))
        try:
            response = await self._client.patch(
                self._document_path(WORKOUTS, workout_id),
                params=params,
                json={"fields": fields},
                headers=self._headers(),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PersistenceFailed(
                f"Could not complete workout {workout_id}", operation="complete_workout"
            ) from exc

    async def append_exercise_session(
        self, workout_id: str, session: ExerciseSession
    ) -> ExerciseSession:
        session.workout_id = workout_id
        doc_id = session.session_id or exercise_document_id(workout_id, session.tap_session_id)
        try:
            created = await self._create_document(
                EXERCISE_SESSIONS, doc_id, exercise_session_fields(session)
            )
            if not created:
                log.info("Exercise session %s already stored", doc_id)
                return await self._get_exercise_session(doc_id)
        except httpx.HTTPError as exc:
            raise PersistenceFailed(
                f"Could not save exercise session to workout {workout_id}",
                operation="append_exercise_session",
            ) from exc
        session.session_id = doc_id
        return session

    async def list_workout_history(self, user_id: str) -> list[WorkoutSession]:
        """Return the user's workouts, newest first, with their exercise sessions."""

        try:
            workout_docs = await self._run_query(WORKOUTS, user_id)
            session_docs = await self._run_query(EXERCISE_SESSIONS, user_id)
            workouts = [parse_workout(document) for document in workout_docs]
            sessions = [parse_exercise_session(document) for document in session_docs]
        except (httpx.HTTPError, ValidationError, ValueError, KeyError) as exc:
            raise PersistenceFailed(
                f"Could not load workout history for user {user_id}",
                operation="list_workout_history",
            ) from exc

        by_workout: defaultdict[str, list[ExerciseSession]] = defaultdict(list)
        for session in sessions:
            by_workout[session.workout_id].append(session)
        for workout in workouts:
            workout.exercise_sessions = sorted(
                by_workout.get(workout.workout_id, []), key=lambda item: item.started_at
            )
        workouts.sort(key=lambda item: item.started_at, reverse=True)
        return workouts

    # ---------- REST helpers ----------
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.id_token}"}

    def _document_path(self, collection: str, doc_id: str) -> str:
        return f"{self.config.documents_path}/{collection}/{doc_id}"

    async def _create_document(
        self, collection: str, doc_id: str, fields: dict[str, dict[str, Any]]
    ) -> bool:
        """Create a document; returns False when it already exists."""

        response = await self._client.post(
            f"{self.config.documents_path}/{collection}",
            params={"documentId": doc_id},
            json={"fields": fields},
            headers=self._headers(),
        )
        if response.status_code == httpx.codes.CONFLICT:
            return False
        response.raise_for_status()
        return True

    async def _get_exercise_session(self, doc_id: str) -> ExerciseSession:
        response = await self._client.get(
            self._document_path(EXERCISE_SESSIONS, doc_id), headers=self._headers()
        )
        response.raise_for_status()
        try:
            return parse_exercise_session(response.json())
        except (ValidationError, ValueError, KeyError) as exc:
            raise PersistenceFailed(
                f"Stored exercise session {doc_id} is unreadable",
                operation="append_exercise_session",
            ) from exc

    async def _run_query(self, collection: str, user_id: str) -> list[dict[str, Any]]:
        # ordering happens client-side so no composite index is needed
        body = {
            "structuredQuery": {
                "from": [{"collectionId": collection}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "userId"},
                        "op": "EQUAL",
                        "value": {"stringValue": user_id},
                    }
                },
            }
        }
        response = await self._client.post(
            f"{self.config.documents_path}:runQuery", json=body, headers=self._headers()
        )
        response.raise_for_status()
        rows = cast(list[dict[str, Any]], response.json())
        return [row["document"] for row in rows if "document" in row]
