"""Notification sinks standing in for the phone's toast messages."""

from __future__ import annotations

import sys
from logging import getLogger
from typing import TextIO

log = getLogger(__name__)


class LoggingNotifier:
    def notify(self, message: str) -> None:
        log.info("Notification: %s", message)


class ConsoleNotifier:
    """Prints each message on its own line; used by the CLI."""

    def __init__(self, stream: TextIO | None = None, *, prefix: str = "> ") -> None:
        self._stream = stream
        self._prefix = prefix

    def notify(self, message: str) -> None:
        stream = self._stream or sys.stdout
        print(f"{self._prefix}{message}", file=stream)
        log.debug("Notification: %s", message)
