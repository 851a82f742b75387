"""Classify an incoming tag payload against the locally tracked session.

The classifier is a pure function of ``(payload, active session, previous
key)``; it never holds state between calls. Rules are evaluated in order and
the first match wins:

1. duplicate re-read of the same tag state -> ``Ignore``
2. active id among the prior ids, with data -> ``CompleteSession(record)``
3. active id among the prior ids, data evicted -> ``CompleteSession(None)``
4. active id missing from the prior ids -> ``AbandonThenStart``
5. nothing active -> ``StartSession``

Prior ids other than the active one belong to other users' finished sessions
and are never surfaced here.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import AbandonThenStart, CompleteSession, Ignore, StartSession
from .errors import MalformedPayload

if TYPE_CHECKING:
    from liftlog.domain.model import ActiveSession, RawTagPayload, SessionRecord

    from .contracts import PayloadKey, ReconciliationAction

log = getLogger(__name__)


def payload_key(payload: RawTagPayload) -> PayloadKey:
    """Return ``(current id, newest prior id or None)`` for duplicate detection."""

    newest_prior = payload.prior_session_ids[0] if payload.prior_session_ids else None
    return payload.current_session_id, newest_prior


def classify(
    payload: RawTagPayload,
    active: ActiveSession | None,
    previous_key: PayloadKey | None = None,
) -> ReconciliationAction:
    """Decide what ``payload`` means for the ``active`` session."""

    if not payload.current_session_id:
        raise MalformedPayload("Tag payload has an empty current session id")

    if previous_key is not None and payload_key(payload) == previous_key:
        return Ignore(reason="duplicate")

    if active is None:
        return StartSession(session_id=payload.current_session_id)

    if active.session_id in payload.prior_session_ids:
        record = _record_for(payload, active.session_id)
        if record is None:
            log.info("Tap-out for %s carries no session data", active.session_id)
        return CompleteSession(session_id=active.session_id, record=record)

    return AbandonThenStart(
        old_session_id=active.session_id,
        new_session_id=payload.current_session_id,
    )


def _record_for(payload: RawTagPayload, session_id: str) -> SessionRecord | None:
    # prior_session_data is keyed by id, so repeated ids resolve to the record the
    # parser kept for the first occurrence
    return payload.prior_session_data.get(session_id)
