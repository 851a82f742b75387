"""Reconciliation actions emitted by the classifier.

Each action is a small immutable value; the orchestrator dispatches on
``kind``. A payload key is the pair used for duplicate-tap detection.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from liftlog.domain.model.enums import ActionKind

if TYPE_CHECKING:
    from liftlog.domain.model import RawTagPayload, SessionRecord


type PayloadKey = tuple[str, str | None]
type PayloadParser = Callable[[bytes | str], RawTagPayload]


@dataclass(frozen=True, slots=True, kw_only=True)
class Ignore:
    reason: str = "duplicate"
    kind: Literal[ActionKind.IGNORE] = ActionKind.IGNORE


@dataclass(frozen=True, slots=True, kw_only=True)
class StartSession:
    session_id: str
    kind: Literal[ActionKind.START] = ActionKind.START


@dataclass(frozen=True, slots=True, kw_only=True)
class CompleteSession:
    """Tap-out for ``session_id``; ``record`` is ``None`` when the tag dropped its data."""

    session_id: str
    record: SessionRecord | None = None
    kind: Literal[ActionKind.COMPLETE] = ActionKind.COMPLETE


@dataclass(frozen=True, slots=True, kw_only=True)
class AbandonThenStart:
    old_session_id: str
    new_session_id: str
    kind: Literal[ActionKind.ABANDON_THEN_START] = ActionKind.ABANDON_THEN_START


type ReconciliationAction = Ignore | StartSession | CompleteSession | AbandonThenStart
