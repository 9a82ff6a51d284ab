"""Conversion between wire payloads and Record DTOs.

Record payloads arrive from two places: the REST API (`{"id", "name",
"marks", "timestamp"}`) and Firestore documents (`{"name", "marks",
"timestamp"}` plus a document id). Timestamps show up in several shapes
depending on which SDK serialized them, so parsing is lenient and falls back
to `None` rather than failing the whole record.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime

from .dto import ChartPoint, Marks, Record

_TIMESTAMP_KEYS = ("timestamp", "createdAt", "created_at")
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def coerce_marks(value: object) -> Marks:
    """Return marks as an `int` when integral, otherwise as a `float`.

    Raises:
        ValueError: When the value is not a finite number.
    """

    if isinstance(value, bool):
        raise ValueError("marks must be numeric")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = float(value.strip())
    if not isinstance(value, float):
        raise ValueError("marks must be numeric")
    if not math.isfinite(value):
        raise ValueError("marks must be finite")
    return int(value) if value.is_integer() else value


def parse_timestamp(value: object) -> datetime | None:
    """Parse a wire timestamp into an aware UTC datetime.

    Accepted shapes:
    - `datetime` (naive values are treated as UTC),
    - `{"seconds": s, "nanoseconds": ns}` and `{"_seconds": s, "_nanoseconds": ns}`,
    - ISO-8601 strings (a trailing `Z` is accepted),
    - epoch seconds as int/float.

    Returns:
        The parsed datetime, or None when the value is missing or unrecognized.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0)) or 0
        if not isinstance(seconds, (int, float)) or not isinstance(nanos, (int, float)):
            return None
        return datetime.fromtimestamp(seconds + nanos / 1_000_000_000, tz=UTC)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return None


def timestamp_payload(value: datetime | None) -> dict[str, int] | None:
    """Serialize a datetime into the `{seconds, nanoseconds}` wire shape."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    delta = value - _EPOCH
    return {
        "seconds": delta.days * 86_400 + delta.seconds,
        "nanoseconds": delta.microseconds * 1_000,
    }


def record_from_payload(payload: Mapping[str, object], *, record_id: str | None = None) -> Record:
    """Build a Record from a REST item or Firestore document dict.

    Args:
        payload: Mapping with `name`, `marks` and an optional timestamp.
        record_id: Explicit id (Firestore document id); defaults to `payload["id"]`.

    Returns:
        The parsed Record.

    Raises:
        ValueError: When `name` or `marks` is missing or malformed.
    """

    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("record name is missing")
    if "marks" not in payload:
        raise ValueError("record marks are missing")

    raw_id = record_id if record_id is not None else payload.get("id", payload.get("_id"))
    created_at = None
    for key in _TIMESTAMP_KEYS:
        if key in payload:
            created_at = parse_timestamp(payload[key])
            break
    return Record(
        id="" if raw_id is None else str(raw_id),
        name=name,
        marks=coerce_marks(payload["marks"]),
        created_at=created_at,
    )


def record_to_payload(record: Record) -> dict[str, object]:
    """Serialize a Record into the REST API item shape."""

    return {
        "id": record.id,
        "name": record.name,
        "marks": record.marks,
        "timestamp": timestamp_payload(record.created_at),
    }


def chart_points(records: Iterable[Record]) -> tuple[ChartPoint, ...]:
    """Project records onto the `{name, marks}` pairs rendered by the chart."""

    return tuple(record.chart_point() for record in records)
