"""Tag payload adapter: NDEF text records and the JSON machines write to them."""

from __future__ import annotations

from .ndef import decode_text_record, encode_text_record
from .schema import (
    CanonicalTagPayload,
    LegacyTagPayload,
    SessionDataPayload,
    SetPayload,
    SlotTagPayload,
)
from .translator import parse_tag_payload

__all__ = [
    "CanonicalTagPayload",
    "LegacyTagPayload",
    "SessionDataPayload",
    "SetPayload",
    "SlotTagPayload",
    "decode_text_record",
    "encode_text_record",
    "parse_tag_payload",
]
