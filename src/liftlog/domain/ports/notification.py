"""Port for user-facing notifications."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """Fire-and-forget toast sink."""

    def notify(self, message: str) -> None: ...
