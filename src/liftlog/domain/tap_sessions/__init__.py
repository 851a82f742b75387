"""NFC tap-session reconciliation.

Flow: tag bytes are parsed into a ``RawTagPayload``, ``classify`` decides what
the read means for the locally active session, and ``SessionOrchestrator``
applies the resulting action through the workout store, the notifier and the
``TimeoutGuard``.
"""

from __future__ import annotations

from .contracts import (
    AbandonThenStart,
    CompleteSession,
    Ignore,
    PayloadKey,
    PayloadParser,
    ReconciliationAction,
    StartSession,
)
from .errors import MalformedPayload, PersistenceFailed, TagUnavailable, TapSessionError
from .orchestrator import SessionOrchestrator, build_exercise_session
from .reconciler import classify, payload_key
from .timeout import TimeoutGuard, TimeoutHandle

__all__ = [
    "AbandonThenStart",
    "CompleteSession",
    "Ignore",
    "MalformedPayload",
    "PayloadKey",
    "PayloadParser",
    "PersistenceFailed",
    "ReconciliationAction",
    "SessionOrchestrator",
    "StartSession",
    "TagUnavailable",
    "TapSessionError",
    "TimeoutGuard",
    "TimeoutHandle",
    "build_exercise_session",
    "classify",
    "payload_key",
]
