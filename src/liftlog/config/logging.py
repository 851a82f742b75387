"""Logging setup shared by the CLI and tests."""

from __future__ import annotations

import logging

# per-request chatter from the HTTP and migration stacks
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "alembic.runtime.migration")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once.

    Third-party loggers in ``NOISY_LOGGERS`` stay at WARNING unless ``level`` is
    DEBUG. Pass ``force=True`` to replace handlers installed earlier.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
