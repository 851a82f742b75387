"""Translate raw tag bytes into domain ``RawTagPayload`` objects."""

from __future__ import annotations

import json
from collections.abc import Mapping
from logging import getLogger

from pydantic import ValidationError

from liftlog.domain.model import RawTagPayload, SessionRecord, SetRecord
from liftlog.domain.tap_sessions import MalformedPayload

from .schema import (
    CanonicalTagPayload,
    LegacyTagPayload,
    SessionDataPayload,
    SlotTagPayload,
    TagPayloadModel,
)

log = getLogger(__name__)

_STRIP_CHARS = "\ufeff\x00 \t\r\n"


def parse_tag_payload(raw: bytes | str | Mapping[str, object]) -> RawTagPayload:
    """Decode, validate and normalise one tag read.

    Raises ``MalformedPayload`` for anything that is not a JSON object in one
    of the accepted shapes.
    """

    document = _load_document(raw)
    model = _validate(document)
    payload = _to_domain(model)
    log.debug(
        "Parsed tag for machine %s: current=%s prior=%s",
        payload.machine_id,
        payload.current_session_id,
        list(payload.prior_session_ids),
    )
    return payload


def _load_document(raw: bytes | str | Mapping[str, object]) -> Mapping[str, object]:
    if isinstance(raw, Mapping):
        return raw

    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayload("Tag payload is not valid UTF-8") from exc
    else:
        text = raw

    text = text.strip(_STRIP_CHARS)
    if not text:
        raise MalformedPayload("Tag payload is empty")

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedPayload(f"Tag payload is not valid JSON: {exc.msg}") from exc

    if not isinstance(document, dict):
        raise MalformedPayload("Tag payload must be a JSON object")
    return document


def _validate(document: Mapping[str, object]) -> TagPayloadModel:
    model_type: type[TagPayloadModel]
    if "currentSessionId" in document or "current_session_id" in document:
        model_type = CanonicalTagPayload
    elif "session_id_a" in document:
        model_type = SlotTagPayload
    elif "session_id_tap_in" in document:
        model_type = LegacyTagPayload
    else:
        model_type = CanonicalTagPayload

    try:
        return model_type.model_validate(document)
    except ValidationError as exc:
        raise MalformedPayload(
            f"Invalid {model_type.__name__}: {exc.error_count()} validation error(s)"
        ) from exc


def _to_domain(model: TagPayloadModel) -> RawTagPayload:
    if isinstance(model, CanonicalTagPayload):
        current = model.current_session_id
        prior_ids = tuple(dict.fromkeys(model.prior_session_ids))
        prior_data = {
            session_id: _session_record(model.prior_session_data[session_id])
            for session_id in prior_ids
            if session_id in model.prior_session_data
        }
    elif isinstance(model, SlotTagPayload):
        current = model.session_id_a
        prior_ids, prior_data = _from_slots(model.prior_slots())
    else:
        current = model.session_id_tap_in
        slots = (
            [(model.session_id_tap_out, model.session_data)]
            if model.session_id_tap_out is not None
            else []
        )
        prior_ids, prior_data = _from_slots(slots)

    return RawTagPayload(
        machine_id=model.machine_id,
        current_session_id=current,
        version=model.version,
        machine_name=model.machine_name,
        machine_type=model.machine_type,
        firmware_version=model.firmware_version,
        exercise_id=model.exercise_id,
        exercise_name=model.exercise_name,
        prior_session_ids=prior_ids,
        prior_session_data=prior_data,
    )


def _from_slots(
    slots: list[tuple[str, SessionDataPayload | None]],
) -> tuple[tuple[str, ...], dict[str, SessionRecord]]:
    # the first slot carrying an id owns it, even when that slot has no data
    prior_ids: list[str] = []
    prior_data: dict[str, SessionRecord] = {}
    for session_id, data in slots:
        if session_id in prior_ids:
            continue
        prior_ids.append(session_id)
        if data is not None:
            prior_data[session_id] = _session_record(data)
    return tuple(prior_ids), prior_data


def _session_record(data: SessionDataPayload) -> SessionRecord:
    return SessionRecord(
        started_at_unix=data.started_at_unix,
        ended_at_unix=data.ended_at_unix,
        sets=tuple(
            SetRecord(weight_lbs=item.weight_lbs, reps=item.reps, duration_ms=item.duration_ms)
            for item in data.sets
        ),
    )
