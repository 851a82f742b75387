"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections import Counter
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from liftlog.adapters.firestore import FirestoreWorkoutStore
from liftlog.adapters.identity import StaticIdentityProvider
from liftlog.adapters.notifications import LoggingNotifier
from liftlog.adapters.sqlalchemy import SqlAlchemyWorkoutStore
from liftlog.adapters.sqlalchemy.unit_of_work import is_started, startup
from liftlog.adapters.tag_payload import parse_tag_payload
from liftlog.adapters.tag_readers import (
    MOCK_MACHINES,
    JsonLinesTagReader,
    SimulatedMachine,
    SimulatedTagReader,
)
from liftlog.config import get_firestore_config, get_identity_config, get_session_config
from liftlog.domain.tap_sessions import PersistenceFailed, SessionOrchestrator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from liftlog.adapters.tag_readers import MockMachine
    from liftlog.domain.model import (
        ExerciseSession,
        ExerciseSet,
        RawTagPayload,
        WorkoutSession,
        WorkoutSummary,
    )
    from liftlog.domain.ports import IdentityProvider, Notifier, TagReader, WorkoutStore

StoreBackend = Literal["sqlite", "firestore"]

log = getLogger(__name__)


@dataclass(slots=True)
class ReplayResult:
    processed: int = 0
    rejected: int = 0
    failed: int = 0
    actions: Counter[str] = field(default_factory=Counter[str])


def build_store(backend: StoreBackend = "sqlite") -> WorkoutStore:
    """Return a store for ``backend``, initialising the local database if needed."""

    if backend == "firestore":
        return FirestoreWorkoutStore(get_firestore_config())
    if not is_started():
        startup()
    return SqlAlchemyWorkoutStore()


def build_orchestrator(
    *,
    store: WorkoutStore,
    identity: IdentityProvider | None = None,
    notifier: Notifier | None = None,
    reader: TagReader | None = None,
    timeout_ms: int | None = None,
) -> SessionOrchestrator:
    effective_timeout = timeout_ms if timeout_ms is not None else get_session_config().timeout_ms
    return SessionOrchestrator(
        store=store,
        identity=identity or StaticIdentityProvider(get_identity_config().user_id),
        notifier=notifier or LoggingNotifier(),
        parse=parse_tag_payload,
        reader=reader,
        timeout_ms=effective_timeout,
    )


@asynccontextmanager
async def _store_scope(
    store: WorkoutStore | None, backend: StoreBackend
) -> AsyncIterator[WorkoutStore]:
    if store is not None:
        yield store
        return
    owned = build_store(backend)
    try:
        yield owned
    finally:
        if isinstance(owned, FirestoreWorkoutStore):
            await owned.aclose()


async def replay_tags(
    path: Path | str,
    *,
    store: WorkoutStore | None = None,
    backend: StoreBackend = "sqlite",
    identity: IdentityProvider | None = None,
    notifier: Notifier | None = None,
    timeout_ms: int | None = None,
    interval_s: float = 0.0,
) -> ReplayResult:
    """Feed every recorded tag payload in ``path`` through one orchestrator."""

    reader = JsonLinesTagReader(path)
    result = ReplayResult()
    async with _store_scope(store, backend) as effective_store:
        orchestrator = build_orchestrator(
            store=effective_store,
            identity=identity,
            notifier=notifier,
            reader=reader,
            timeout_ms=timeout_ms,
        )
        async with orchestrator:
            while reader.remaining:
                raw = await reader.read_once()
                result.processed += 1
                try:
                    action = await orchestrator.handle_incoming_payload(raw)
                except PersistenceFailed as exc:
                    log.warning("Tag %d not applied: %s", result.processed, exc)
                    result.failed += 1
                    continue
                if action is None:
                    result.rejected += 1
                else:
                    result.actions[action.kind] += 1
                if interval_s:
                    await asyncio.sleep(interval_s)

    log.info(
        "Replayed %s tags from %s: rejected=%s, failed=%s, actions=%s",
        result.processed,
        path,
        result.rejected,
        result.failed,
        dict(result.actions),
    )
    return result


async def simulate_workout(
    *,
    machines: Sequence[MockMachine] = MOCK_MACHINES[:2],
    sets_per_session: int = 3,
    start_weight_lbs: float = 80.0,
    end_workout: bool = True,
    store: WorkoutStore | None = None,
    backend: StoreBackend = "sqlite",
    identity: IdentityProvider | None = None,
    notifier: Notifier | None = None,
    timeout_ms: int | None = None,
) -> WorkoutSummary | None:
    """Tap in and out of each mock machine, lifting ``sets_per_session`` sets on each."""

    reader = SimulatedTagReader()
    async with _store_scope(store, backend) as effective_store:
        orchestrator = build_orchestrator(
            store=effective_store,
            identity=identity,
            notifier=notifier,
            reader=reader,
            timeout_ms=timeout_ms,
        )
        async with orchestrator:
            for mock_machine in machines:
                machine = SimulatedMachine(mock_machine)
                reader.present_machine(machine)
                await orchestrator.read_tag()

                for index in range(sets_per_session):
                    machine.record_set(
                        weight_lbs=start_weight_lbs + 5 * index,
                        reps=max(12 - 2 * index, 1),
                        duration_ms=30_000 + 2_000 * index,
                    )
                machine.finish_session()
                reader.present_machine(machine)
                await orchestrator.read_tag()

            if not end_workout:
                return None
            return await orchestrator.end_workout()


def parse_payload_file(path: Path | str) -> RawTagPayload:
    """Validate a tag payload stored in a file."""

    return parse_tag_payload(Path(path).read_bytes())


async def list_history(
    *,
    store: WorkoutStore | None = None,
    backend: StoreBackend = "sqlite",
    user_id: str | None = None,
) -> list[WorkoutSession]:
    effective_user = user_id or get_identity_config().user_id
    async with _store_scope(store, backend) as effective_store:
        return await effective_store.list_workout_history(effective_user)


async def record_manual_exercise(
    exercise_name: str,
    sets: Sequence[ExerciseSet],
    *,
    store: WorkoutStore | None = None,
    backend: StoreBackend = "sqlite",
    identity: IdentityProvider | None = None,
    notifier: Notifier | None = None,
) -> ExerciseSession:
    """Add sets lifted without a tagged machine to the user's open workout."""

    async with _store_scope(store, backend) as effective_store:
        orchestrator = build_orchestrator(
            store=effective_store, identity=identity, notifier=notifier
        )
        async with orchestrator:
            return await orchestrator.add_manual_exercise(exercise_name, sets)


async def last_machine_session(
    machine_id: str,
    *,
    store: WorkoutStore | None = None,
    backend: StoreBackend = "sqlite",
    identity: IdentityProvider | None = None,
) -> ExerciseSession | None:
    async with _store_scope(store, backend) as effective_store:
        orchestrator = build_orchestrator(store=effective_store, identity=identity)
        async with orchestrator:
            return await orchestrator.last_session_for_machine(machine_id)
