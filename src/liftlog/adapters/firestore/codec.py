"""Firestore REST typed-value encoding.

Firestore's JSON API wraps every value in a single-key object naming its type
(``{"stringValue": "x"}``, ``{"integerValue": "3"}`` ...). Only the types the
workout documents use are supported.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, cast

_FRACTION = re.compile(r"\.(\d{6})\d+")


def encode_value(value: object) -> dict[str, Any]:
    # bool before int: bool is an int subclass
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": _format_timestamp(value)}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(cast(Mapping[str, object], value))}}
    if isinstance(value, Sequence):
        items = cast(Sequence[object], value)
        return {"arrayValue": {"values": [encode_value(item) for item in items]}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def encode_fields(values: Mapping[str, object]) -> dict[str, dict[str, Any]]:
    return {key: encode_value(value) for key, value in values.items()}


def decode_value(value: Mapping[str, Any]) -> object:
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return str(value["stringValue"])
    if "timestampValue" in value:
        return _parse_timestamp(str(value["timestampValue"]))
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields") or {})
    if "arrayValue" in value:
        return [decode_value(item) for item in value["arrayValue"].get("values") or []]
    raise ValueError(f"Unsupported Firestore value: {sorted(value)}")


def decode_fields(fields: Mapping[str, Mapping[str, Any]]) -> dict[str, object]:
    return {key: decode_value(value) for key, value in fields.items()}


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _parse_timestamp(value: str) -> datetime:
    # the API returns nanoseconds
    value = _FRACTION.sub(r".\1", value)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
