"""Typed value codec for the Firestore REST wire format.

Firestore represents every field as a single-key object naming its type, e.g.
``{"integerValue": "42"}`` or ``{"arrayValue": {"values": [...]}}``. The two
entry points below are mutual inverses over the native value domain:

- ``None``, ``str``, ``bool``, ``int``, ``float``
- timezone-aware ``datetime`` (naive values are read as UTC)
- lists/tuples of encodable values (decoded as lists)
- string-keyed mappings of encodable values (decoded as dicts)
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

WireValue = dict[str, Any]

_FRACTION_RE = re.compile(r"\.(\d+)")


class FirestoreCodecError(ValueError):
  """Raised when a value cannot be mapped to or from the wire format."""


def encode_value(value: Any) -> WireValue:
  """Encode a native value as a tagged Firestore value."""
  if value is None:
    return {"nullValue": None}
  if isinstance(value, str):
    return {"stringValue": value}
  # bool is an int subclass, so it must be matched first.
  if isinstance(value, bool):
    return {"booleanValue": value}
  if isinstance(value, int):
    # Integers travel as decimal text so 64-bit values keep full precision.
    return {"integerValue": str(value)}
  if isinstance(value, float):
    return {"doubleValue": _encode_double(value)}
  if isinstance(value, datetime):
    return {"timestampValue": _format_timestamp(value)}
  if isinstance(value, list | tuple):
    return {"arrayValue": {"values": [encode_value(item) for item in value]}}
  if isinstance(value, Mapping):
    return {"mapValue": {"fields": encode_fields(value)}}
  raise FirestoreCodecError(f"Unsupported value type for Firestore encoding: {type(value).__name__}")


def encode_fields(data: Mapping[str, Any]) -> dict[str, WireValue]:
  """Encode a mapping into a Firestore ``fields`` object."""
  fields: dict[str, WireValue] = {}
  for key, value in data.items():
    if not isinstance(key, str):
      raise FirestoreCodecError(f"Firestore field names must be strings, got {type(key).__name__}")
    fields[key] = encode_value(value)
  return fields


def decode_value(wire: Any) -> Any:
  """Decode a tagged Firestore value into its native form."""
  if not isinstance(wire, Mapping) or len(wire) != 1:
    raise FirestoreCodecError(f"Malformed Firestore value: {wire!r}")

  ((tag, payload),) = wire.items()
  decoder = _DECODERS.get(tag)
  if decoder is None:
    raise FirestoreCodecError(f"Unrecognized Firestore value tag: {tag}")
  return decoder(payload)


def decode_fields(fields: Mapping[str, Any] | None) -> dict[str, Any]:
  """Decode a Firestore ``fields`` object; a missing object means an empty map."""
  if fields is None:
    return {}
  if not isinstance(fields, Mapping):
    raise FirestoreCodecError(f"Malformed Firestore fields object: {fields!r}")
  return {key: decode_value(value) for key, value in fields.items()}


def _encode_double(value: float) -> float | str:
  # JSON has no literal for these, so the REST API accepts their names as strings.
  if math.isnan(value):
    return "NaN"
  if math.isinf(value):
    return "Infinity" if value > 0 else "-Infinity"
  return value


def _format_timestamp(value: datetime) -> str:
  if value.tzinfo is None:
    value = value.replace(tzinfo=UTC)
  return value.astimezone(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _parse_timestamp(raw: Any) -> datetime:
  if not isinstance(raw, str):
    raise FirestoreCodecError(f"Malformed timestampValue: {raw!r}")
  # The store reports up to nanosecond precision; datetime holds microseconds.
  normalized = _FRACTION_RE.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), raw, count=1)
  if normalized.endswith(("Z", "z")):
    normalized = normalized[:-1] + "+00:00"
  try:
    parsed = datetime.fromisoformat(normalized)
  except ValueError as exc:
    raise FirestoreCodecError(f"Malformed timestampValue: {raw!r}") from exc
  if parsed.tzinfo is None:
    parsed = parsed.replace(tzinfo=UTC)
  return parsed.astimezone(UTC)


def _decode_integer(raw: Any) -> int:
  try:
    return int(raw)
  except (TypeError, ValueError) as exc:
    raise FirestoreCodecError(f"Malformed integerValue: {raw!r}") from exc


def _decode_double(raw: Any) -> float:
  if isinstance(raw, bool):
    raise FirestoreCodecError(f"Malformed doubleValue: {raw!r}")
  try:
    return float(raw)
  except (TypeError, ValueError) as exc:
    raise FirestoreCodecError(f"Malformed doubleValue: {raw!r}") from exc


def _decode_boolean(raw: Any) -> bool:
  if not isinstance(raw, bool):
    raise FirestoreCodecError(f"Malformed booleanValue: {raw!r}")
  return raw


def _decode_string(raw: Any) -> str:
  if not isinstance(raw, str):
    raise FirestoreCodecError(f"Malformed stringValue: {raw!r}")
  return raw


def _decode_array(raw: Any) -> list[Any]:
  # Empty arrays come back as {"arrayValue": {}}.
  if not isinstance(raw, Mapping):
    raise FirestoreCodecError(f"Malformed arrayValue: {raw!r}")
  return [decode_value(item) for item in raw.get("values") or []]


def _decode_map(raw: Any) -> dict[str, Any]:
  if not isinstance(raw, Mapping):
    raise FirestoreCodecError(f"Malformed mapValue: {raw!r}")
  return decode_fields(raw.get("fields"))


_DECODERS: dict[str, Callable[[Any], Any]] = {
  "nullValue": lambda _: None,
  "stringValue": _decode_string,
  "integerValue": _decode_integer,
  "doubleValue": _decode_double,
  "booleanValue": _decode_boolean,
  "timestampValue": _parse_timestamp,
  "arrayValue": _decode_array,
  "mapValue": _decode_map,
}
