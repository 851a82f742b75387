from __future__ import annotations

from datetime import UTC, datetime

import pytest

from liftlog.domain.model import ActiveSession, RawTagPayload, SessionRecord, SetRecord
from liftlog.domain.tap_sessions import (
    AbandonThenStart,
    CompleteSession,
    Ignore,
    MalformedPayload,
    StartSession,
    classify,
    payload_key,
)

ARMED_AT = datetime(2025, 9, 7, 14, 0, tzinfo=UTC)


def _active(session_id: str) -> ActiveSession:
    return ActiveSession(session_id=session_id, armed_at=ARMED_AT)


def _record(*reps: int) -> SessionRecord:
    return SessionRecord(
        started_at_unix=100,
        ended_at_unix=200,
        sets=tuple(SetRecord(weight_lbs=80, reps=count, duration_ms=1000) for count in reps),
    )


def _payload(
    current: str,
    prior_ids: tuple[str, ...] = (),
    prior_data: dict[str, SessionRecord] | None = None,
) -> RawTagPayload:
    return RawTagPayload(
        machine_id="machine-001",
        current_session_id=current,
        prior_session_ids=prior_ids,
        prior_session_data=prior_data or {},
    )


def test_payload_key_uses_current_and_newest_prior() -> None:
    assert payload_key(_payload("s2", ("s1", "s0"))) == ("s2", "s1")
    assert payload_key(_payload("s1")) == ("s1", None)


def test_first_tap_starts_session() -> None:
    action = classify(_payload("s1"), None)

    assert action == StartSession(session_id="s1")


def test_repeated_read_is_ignored_even_without_active_session() -> None:
    payload = _payload("s1")

    assert classify(payload, None, payload_key(payload)) == Ignore(reason="duplicate")
    assert classify(payload, _active("s1"), payload_key(payload)) == Ignore()


def test_tap_out_with_data_completes_with_record() -> None:
    record = _record(10, 8)
    payload = _payload("s2", ("s1",), {"s1": record})

    action = classify(payload, _active("s1"), ("s1", None))

    assert action == CompleteSession(session_id="s1", record=record)


def test_tap_out_completes_only_the_active_session() -> None:
    # s2 sits in slot a but is not started by the same read
    payload = _payload("s2", ("s1", "s0"), {"s1": _record(10), "s0": _record(5)})

    action = classify(payload, _active("s1"))

    assert isinstance(action, CompleteSession)
    assert action.session_id == "s1"
    assert action.record == _record(10)


def test_evicted_data_completes_without_record() -> None:
    payload = _payload("s_a", ("s_b", "s_c", "s_d"), {"s_b": _record(10), "s_c": _record(9)})

    action = classify(payload, _active("s_d"))

    assert action == CompleteSession(session_id="s_d", record=None)


def test_unknown_active_session_is_abandoned() -> None:
    payload = _payload("s9", ("s8",), {"s8": _record(10)})

    action = classify(payload, _active("s1"))

    assert action == AbandonThenStart(old_session_id="s1", new_session_id="s9")


def test_other_users_prior_sessions_never_surface() -> None:
    payload = _payload("s3", ("s2", "s1"), {"s2": _record(10), "s1": _record(12)})

    assert classify(payload, None) == StartSession(session_id="s3")


def test_duplicate_prior_ids_resolve_to_the_kept_record() -> None:
    record = _record(10)
    payload = _payload("s3", ("s1", "s1"), {"s1": record})

    assert classify(payload, _active("s1")) == CompleteSession(session_id="s1", record=record)


def test_empty_current_session_id_is_malformed() -> None:
    with pytest.raises(MalformedPayload):
        classify(_payload(""), None)


@pytest.mark.parametrize("active", [None, "s1", "s7"])
def test_classify_is_pure(active: str | None) -> None:
    payload = _payload("s2", ("s1",), {"s1": _record(10)})
    active_session = _active(active) if active is not None else None

    first = classify(payload, active_session, ("s0", None))
    second = classify(payload, active_session, ("s0", None))

    assert first == second
