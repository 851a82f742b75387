"""Single-shot session timeout on the running event loop.

The guard keeps one "current" handle. Expiry and disarm both compare the
handle they hold against the current one and clear it; whichever runs first
wins, so the callback fires at most once and never after a successful disarm.
All methods must be called from the loop thread.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from liftlog.config.session import DEFAULT_SESSION_TIMEOUT_MS

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TimeoutHandle:
    """Token identifying one arming of a ``TimeoutGuard``."""

    __slots__ = ("_timer", "armed_at", "duration_ms", "session_id")

    def __init__(self, session_id: str, duration_ms: int, armed_at: datetime) -> None:
        self.session_id = session_id
        self.duration_ms = duration_ms
        self.armed_at = armed_at
        self._timer: asyncio.TimerHandle | None = None

    def __repr__(self) -> str:
        return (
            f"TimeoutHandle(session_id={self.session_id!r}, duration_ms={self.duration_ms}, "
            f"armed_at={self.armed_at.isoformat()})"
        )


class TimeoutGuard:
    def __init__(
        self,
        on_expire: Callable[[str], None],
        *,
        default_duration_ms: int = DEFAULT_SESSION_TIMEOUT_MS,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._on_expire = on_expire
        self._default_duration_ms = default_duration_ms
        self._now = now
        self._current: TimeoutHandle | None = None

    @property
    def pending(self) -> TimeoutHandle | None:
        return self._current

    def arm(self, session_id: str, duration_ms: int | None = None) -> TimeoutHandle:
        """Schedule expiry for ``session_id``, replacing any pending guard."""

        effective_ms = self._default_duration_ms if duration_ms is None else duration_ms
        if effective_ms < 0:
            raise ValueError("Timeout duration must be non-negative")

        loop = asyncio.get_running_loop()
        self.cancel_all()

        handle = TimeoutHandle(session_id, effective_ms, self._now())
        handle._timer = loop.call_later(effective_ms / 1000, self._expire, handle)  # noqa: SLF001
        self._current = handle
        log.debug("Armed session timeout %r", handle)
        return handle

    def disarm(self, handle: TimeoutHandle | None) -> bool:
        """Cancel ``handle``; return False when it already fired or was replaced."""

        if handle is None or self._current is not handle:
            return False
        self._current = None
        if handle._timer is not None:  # noqa: SLF001
            handle._timer.cancel()  # noqa: SLF001
        log.debug("Disarmed session timeout for %s", handle.session_id)
        return True

    def cancel_all(self) -> None:
        self.disarm(self._current)

    def _expire(self, handle: TimeoutHandle) -> None:
        if self._current is not handle:
            return
        self._current = None
        log.info("Session %s timed out after %sms", handle.session_id, handle.duration_ms)
        self._on_expire(handle.session_id)
