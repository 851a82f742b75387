"""Alembic environment for the liftlog workout tables."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from liftlog.adapters.sqlalchemy import mapper_registry, start_mappers
from liftlog.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config

if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)

log = logging.getLogger("alembic.env")

start_mappers()

target_metadata = mapper_registry.metadata

# SQLite cannot ALTER most constraints in place
_OPTIONS = {"render_as_batch": True, "compare_type": True}


def _database_uri() -> str:
    return config.attributes.get("database_uri") or get_database_config().uri


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata, **_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    context.configure(
        url=_database_uri(), target_metadata=target_metadata, literal_binds=True, **_OPTIONS
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    shared_connection: Connection | None = config.attributes.get("connection")
    if shared_connection is not None:
        _migrate(shared_connection)
        return

    engine = create_engine(_database_uri(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _migrate(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    log.debug("Migrating workout schema on %s", _database_uri())
    run_migrations_online()
