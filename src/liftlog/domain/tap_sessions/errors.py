"""Error taxonomy for tap-session reconciliation."""

from __future__ import annotations


class TapSessionError(RuntimeError):
    """Base class for recoverable tap-session failures."""


class MalformedPayload(TapSessionError):
    """Raised when tag bytes cannot be parsed into a usable payload."""


class PersistenceFailed(TapSessionError):
    """Raised when the workout store is unavailable or rejects a write."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class TagUnavailable(TapSessionError):
    """Raised when the tag reader hardware is missing or disabled."""
