"""Minimal NDEF well-known Text record codec.

Only the record payload is handled here (status byte, language code, text);
the NDEF message header is left to the reader hardware.
"""

from __future__ import annotations

from liftlog.domain.tap_sessions import MalformedPayload

_UTF16_FLAG = 0x80
_LANGUAGE_LENGTH_MASK = 0x3F


def decode_text_record(record: bytes) -> str:
    """Return the text of an NDEF Text record payload, skipping the language code."""

    if not record:
        raise MalformedPayload("NDEF record is empty")

    status = record[0]
    language_length = status & _LANGUAGE_LENGTH_MASK
    start = 1 + language_length
    if start > len(record):
        raise MalformedPayload("NDEF language code runs past the record")

    encoding = "utf-16" if status & _UTF16_FLAG else "utf-8"
    try:
        return record[start:].decode(encoding)
    except UnicodeDecodeError as exc:
        raise MalformedPayload(f"NDEF text is not valid {encoding}") from exc


def encode_text_record(text: str, language: str = "en") -> bytes:
    """Build a UTF-8 NDEF Text record payload."""

    language_bytes = language.encode("ascii")
    if len(language_bytes) > _LANGUAGE_LENGTH_MASK:
        raise ValueError("NDEF language code is too long")
    return bytes([len(language_bytes)]) + language_bytes + text.encode("utf-8")
