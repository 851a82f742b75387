from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from liftlog.adapters.sqlalchemy import start_mappers
from liftlog.adapters.sqlalchemy.unit_of_work import shutdown, startup
from liftlog.config import MEMORY_DATABASE_URI
from tests.helpers.workouts import FakeWorkoutStore, FixedIdentity, RecordingNotifier

os.environ.setdefault("DATABASE_URI", MEMORY_DATABASE_URI)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(MEMORY_DATABASE_URI, future=True)
    start_mappers()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def started_sqlite(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def store() -> FakeWorkoutStore:
    return FakeWorkoutStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def identity() -> FixedIdentity:
    return FixedIdentity()
