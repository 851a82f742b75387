"""Apply reconciliation actions against the store, notifier and timeout guard.

One orchestrator is built per signed-in user. Every event it handles (tag
reads, timeout expiries, explicit cancellation, ending a workout) goes through
a single FIFO queue drained by one worker task, so a reconciliation suspended
on store I/O is never interleaved with another one. Store calls always happen
before local state is touched; a failed call leaves the active session, the
guard and the duplicate-detection key exactly as they were.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, cast

from liftlog.config.session import DEFAULT_SESSION_TIMEOUT_MS
from liftlog.domain.model import (
    MANUAL_MACHINE_TYPE,
    ActiveSession,
    ExerciseSession,
    ExerciseSet,
    find_open_workout,
    latest_session_for_machine,
    manual_machine_id,
    summarize_workout,
)

from .contracts import AbandonThenStart, CompleteSession, Ignore, StartSession
from .errors import MalformedPayload, PersistenceFailed, TagUnavailable
from .reconciler import classify, payload_key
from .timeout import TimeoutGuard

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence
    from types import TracebackType

    from liftlog.domain.model import RawTagPayload, SessionRecord, WorkoutSummary
    from liftlog.domain.ports import IdentityProvider, Notifier, TagReader, WorkoutStore

    from .contracts import PayloadKey, PayloadParser, ReconciliationAction
    from .timeout import TimeoutHandle

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def build_exercise_session(
    record: SessionRecord,
    payload: RawTagPayload,
    *,
    user_id: str,
    workout_id: str,
    tap_session_id: str,
) -> ExerciseSession:
    """Map a tag session record onto an unsaved ``ExerciseSession``."""

    return ExerciseSession(
        user_id=user_id,
        workout_id=workout_id,
        machine_id=payload.machine_id,
        machine_type=payload.machine_type,
        started_at=datetime.fromtimestamp(record.started_at_unix, UTC),
        ended_at=datetime.fromtimestamp(record.ended_at_unix, UTC),
        sets=[
            ExerciseSet(
                weight_lbs=tag_set.weight_lbs,
                reps=tag_set.reps,
                duration_ms=tag_set.duration_ms,
            )
            for tag_set in record.sets
        ],
        tap_session_id=tap_session_id,
    )


@dataclass(slots=True)
class _Job:
    operation: Callable[[], Awaitable[object]]
    result: asyncio.Future[object] | None = None
    label: str = "job"


def _cancel_job(job: _Job) -> None:
    if job.result is not None and not job.result.done():
        job.result.cancel()


class SessionOrchestrator:
    def __init__(
        self,
        *,
        store: WorkoutStore,
        identity: IdentityProvider,
        notifier: Notifier,
        parse: PayloadParser,
        reader: TagReader | None = None,
        timeout_ms: int = DEFAULT_SESSION_TIMEOUT_MS,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._identity = identity
        self._notifier = notifier
        self._parse = parse
        self._reader = reader
        self._timeout_ms = timeout_ms
        self._now = now

        self._guard = TimeoutGuard(self._on_timeout, default_duration_ms=timeout_ms, now=now)
        self._timeout_handle: TimeoutHandle | None = None
        self._active: ActiveSession | None = None
        self._last_key: PayloadKey | None = None
        self._workout_id: str | None = None

        self._queue: asyncio.Queue[_Job] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._in_flight: _Job | None = None

    # ---------- Lifecycle ----------
    async def __aenter__(self) -> SessionOrchestrator:
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def start(self) -> None:
        if self._worker is not None and not self._worker.done():
            return
        self._queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._run(), name="liftlog-session-orchestrator")

    async def aclose(self) -> None:
        """Stop listening, cancel the guard and drop queued events."""

        if self._reader is not None:
            await self._reader.stop()
        self._guard.cancel_all()
        self._timeout_handle = None

        if self._worker is not None:
            self._worker.cancel()
            await asyncio.gather(self._worker, return_exceptions=True)
            self._worker = None

        if self._in_flight is not None:
            _cancel_job(self._in_flight)
            self._in_flight = None

        if self._queue is not None:
            while not self._queue.empty():
                _cancel_job(self._queue.get_nowait())
            self._queue = None

    # ---------- State ----------
    @property
    def active_session(self) -> ActiveSession | None:
        return self._active

    @property
    def current_workout_id(self) -> str | None:
        return self._workout_id

    # ---------- Public operations ----------
    async def handle_incoming_payload(self, raw: bytes | str) -> ReconciliationAction | None:
        """Reconcile one tag read; returns the applied action, or None if rejected."""

        result = await self._submit(partial(self._process_payload, raw), label="tag")
        return cast("ReconciliationAction | None", result)

    async def read_tag(self) -> ReconciliationAction | None:
        """Read a single tag from the configured reader and reconcile it."""

        try:
            raw = await self._require_reader().read_once()
        except TagUnavailable:
            self._notifier.notify("NFC is not available on this device")
            raise
        return await self.handle_incoming_payload(raw)

    async def start_listening(self) -> None:
        try:
            await self._require_reader().listen(self._on_tag)
        except TagUnavailable:
            self._notifier.notify("NFC is not available on this device")
            raise
        log.info("Listening for tags")

    async def stop_listening(self) -> None:
        if self._reader is not None:
            await self._reader.stop()

    async def clear_current_session(self) -> bool:
        """Cancel the active session without persisting anything."""

        result = await self._submit(self._cancel_active, label="cancel")
        return bool(result)

    async def end_workout(self) -> WorkoutSummary | None:
        """Close the open workout with aggregate totals."""

        result = await self._submit(self._end_workout, label="end-workout")
        return cast("WorkoutSummary | None", result)

    async def last_session_for_machine(self, machine_id: str) -> ExerciseSession | None:
        """Most recent recorded session on ``machine_id``, for showing previous weights."""

        result = await self._submit(
            partial(self._last_session_for_machine, machine_id), label="history"
        )
        return cast("ExerciseSession | None", result)

    async def add_manual_exercise(
        self,
        exercise_name: str,
        sets: Sequence[ExerciseSet],
        *,
        started_at: datetime | None = None,
        ended_at: datetime | None = None,
    ) -> ExerciseSession:
        """Record sets lifted without a tagged machine into the open workout.

        The exercise is stored under ``manual_machine_id(exercise_name)``. The
        active tap session, if any, is left running.
        """

        machine_id = manual_machine_id(exercise_name)
        if not sets:
            raise ValueError("A manual exercise needs at least one set")
        for exercise_set in sets:
            if min(exercise_set.weight_lbs, exercise_set.reps, exercise_set.duration_ms) < 0:
                raise ValueError(f"Set values must be non-negative: {exercise_set!r}")

        result = await self._submit(
            partial(
                self._add_manual_exercise,
                exercise_name.strip(),
                machine_id,
                list(sets),
                started_at,
                ended_at,
            ),
            label="manual",
        )
        return cast("ExerciseSession", result)

    # ---------- Queue ----------
    async def _submit(
        self, operation: Callable[[], Awaitable[object]], *, label: str
    ) -> object:
        self.start()
        assert self._queue is not None
        future: asyncio.Future[object] = asyncio.get_running_loop().create_future()
        self._queue.put_nowait(_Job(operation=operation, result=future, label=label))
        return await future

    async def _run(self) -> None:
        assert self._queue is not None
        queue = self._queue
        while True:
            job = await queue.get()
            self._in_flight = job
            try:
                outcome = await job.operation()
            except Exception as exc:
                if job.result is None:
                    log.exception("Unhandled error in %s event", job.label)
                elif not job.result.done():
                    job.result.set_exception(exc)
            else:
                if job.result is not None and not job.result.done():
                    job.result.set_result(outcome)
            finally:
                self._in_flight = None
                queue.task_done()

    def _on_timeout(self, session_id: str) -> None:
        # invoked by the guard from the loop; defer to the queue
        if self._queue is None:
            return
        self._queue.put_nowait(
            _Job(operation=partial(self._expire_session, session_id), label="timeout")
        )

    async def _on_tag(self, raw: bytes) -> None:
        try:
            await self.handle_incoming_payload(raw)
        except PersistenceFailed as exc:
            log.warning("Tag event not applied: %s", exc)

    # ---------- Event handlers (run on the worker) ----------
    async def _process_payload(self, raw: bytes | str) -> ReconciliationAction | None:
        try:
            payload = self._parse(raw)
            action = classify(payload, self._active, self._last_key)
        except MalformedPayload as exc:
            log.warning("Rejected tag payload: %s", exc)
            self._notifier.notify("Invalid tag data")
            return None

        log.info(
            "Tag %s on %s classified as %s",
            payload.current_session_id,
            payload.machine_id,
            action.kind,
        )

        if isinstance(action, Ignore):
            self._notifier.notify(
                f"Session already active on {payload.machine_label}. Start working out!"
            )
        elif isinstance(action, StartSession):
            await self._start_session(payload, action.session_id, abandoned=None)
        elif isinstance(action, CompleteSession):
            await self._complete_session(payload, action)
        elif isinstance(action, AbandonThenStart):
            await self._start_session(
                payload, action.new_session_id, abandoned=action.old_session_id
            )
        else:  # pragma: no cover
            raise TypeError(f"Unsupported reconciliation action: {action!r}")

        self._last_key = payload_key(payload)
        return action

    async def _start_session(
        self, payload: RawTagPayload, session_id: str, *, abandoned: str | None
    ) -> None:
        try:
            await self._ensure_workout()
        except PersistenceFailed:
            log.exception("Could not open a workout for session %s", session_id)
            self._notifier.notify("Failed to start session")
            raise

        if abandoned is not None:
            log.warning("Abandoning session %s without data", abandoned)
            self._deactivate()
            self._notifier.notify("Previous session abandoned")

        handle = self._guard.arm(session_id, self._timeout_ms)
        self._timeout_handle = handle
        self._active = ActiveSession(
            session_id=session_id,
            armed_at=handle.armed_at,
            machine_id=payload.machine_id,
            machine_name=payload.machine_name,
        )
        self._notifier.notify(f"Started session on {payload.machine_label}")

    async def _complete_session(self, payload: RawTagPayload, action: CompleteSession) -> None:
        record = action.record
        if record is None or not record.sets:
            self._deactivate()
            self._notifier.notify("No workout data recorded")
            return

        try:
            workout_id = await self._ensure_workout()
            session = build_exercise_session(
                record,
                payload,
                user_id=self._identity.user_id,
                workout_id=workout_id,
                tap_session_id=action.session_id,
            )
            await self._store.append_exercise_session(workout_id, session)
        except PersistenceFailed:
            log.exception("Could not save session %s", action.session_id)
            self._notifier.notify("Failed to save workout data")
            raise

        self._deactivate()
        self._notifier.notify(f"Saved workout: {len(record.sets)} sets on {payload.machine_label}")

    async def _expire_session(self, session_id: str) -> None:
        if self._active is None or self._active.session_id != session_id:
            log.debug("Ignoring stale timeout for %s", session_id)
            return
        log.warning("Session %s timed out without a tap-out", session_id)
        self._active = None
        self._timeout_handle = None
        self._notifier.notify("Session timed out")

    async def _cancel_active(self) -> bool:
        if self._active is None:
            return False
        log.info("Cancelling session %s", self._active.session_id)
        self._deactivate()
        return True

    async def _end_workout(self) -> WorkoutSummary | None:
        user_id = self._identity.user_id
        try:
            history = await self._store.list_workout_history(user_id)
            workout = (
                next((w for w in history if w.workout_id == self._workout_id), None)
                if self._workout_id is not None
                else find_open_workout(history)
            )
            if workout is None or not workout.is_open:
                self._workout_id = None
                return None
            summary = summarize_workout(workout.exercise_sessions, ended_at=self._now())
            await self._store.complete_workout(workout.workout_id, summary)
        except PersistenceFailed:
            log.exception("Could not end workout for user %s", user_id)
            self._notifier.notify("Failed to end workout")
            raise

        self._deactivate()
        self._workout_id = None
        self._notifier.notify(
            f"Workout complete: {summary.total_sets} sets, {summary.total_volume:.0f} lbs"
        )
        return summary

    async def _last_session_for_machine(self, machine_id: str) -> ExerciseSession | None:
        history = await self._store.list_workout_history(self._identity.user_id)
        return latest_session_for_machine(history, machine_id)

    async def _add_manual_exercise(
        self,
        exercise_name: str,
        machine_id: str,
        sets: list[ExerciseSet],
        started_at: datetime | None,
        ended_at: datetime | None,
    ) -> ExerciseSession:
        now = self._now()
        try:
            workout_id = await self._ensure_workout()
            session = await self._store.append_exercise_session(
                workout_id,
                ExerciseSession(
                    user_id=self._identity.user_id,
                    workout_id=workout_id,
                    machine_id=machine_id,
                    machine_type=MANUAL_MACHINE_TYPE,
                    started_at=started_at or now,
                    ended_at=ended_at or now,
                    sets=sets,
                ),
            )
        except PersistenceFailed:
            log.exception("Could not save manual exercise %s", exercise_name)
            self._notifier.notify("Failed to save workout data")
            raise

        log.info("Saved manual exercise %s as %s", exercise_name, session.session_id)
        self._notifier.notify(f"Saved workout: {len(sets)} sets on {exercise_name}")
        return session

    # ---------- Helpers ----------
    async def _ensure_workout(self) -> str:
        if self._workout_id is not None:
            return self._workout_id
        user_id = self._identity.user_id
        open_workout = find_open_workout(await self._store.list_workout_history(user_id))
        if open_workout is None:
            open_workout = await self._store.create_workout(user_id)
            log.info("Created workout %s for user %s", open_workout.workout_id, user_id)
        self._workout_id = open_workout.workout_id
        return self._workout_id

    def _deactivate(self) -> None:
        self._guard.disarm(self._timeout_handle)
        self._timeout_handle = None
        self._active = None

    def _require_reader(self) -> TagReader:
        if self._reader is None:
            raise TagUnavailable("No tag reader configured")
        return self._reader
