"""Conversion between profile dicts and Firestore REST typed values.

Profile documents hold scalars, nested attribute maps and lists. Integers
travel as strings and timestamps as RFC 3339 in UTC, as the REST API
expects.
"""

import base64
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any


def to_value(value: Any) -> dict[str, Any]:
    """Wrap one Python value in its Firestore ``Value`` envelope."""
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        return {"timestampValue": stamp}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, dict):
        return {"mapValue": {"fields": to_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [to_value(item) for item in value]}}
    raise TypeError(f"Cannot store {type(value).__name__} in a profile document")


def to_fields(data: dict[str, Any]) -> dict[str, Any]:
    return {str(key): to_value(item) for key, item in data.items()}


def encode_document(data: dict[str, Any]) -> dict[str, Any]:
    """Request body for a document write: ``{"fields": {...}}``."""
    return {"fields": to_fields(data)}


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "nullValue": lambda raw: None,
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "timestampValue": lambda raw: datetime.fromisoformat(raw.replace("Z", "+00:00")),
    "bytesValue": base64.b64decode,
    "referenceValue": str,
    "mapValue": lambda raw: decode_fields(raw.get("fields")),
    "arrayValue": lambda raw: [from_value(item) for item in raw.get("values") or ()],
}


def from_value(envelope: dict[str, Any]) -> Any:
    """Unwrap a Firestore ``Value``; unknown kinds (geo points) decode to None."""
    for kind, raw in envelope.items():
        decoder = _DECODERS.get(kind)
        if decoder is not None:
            return decoder(raw)
    return None


def decode_fields(fields: dict[str, Any] | None) -> dict[str, Any]:
    """Plain dict from a document's ``fields`` mapping (missing means empty)."""
    return {key: from_value(envelope) for key, envelope in (fields or {}).items()}
