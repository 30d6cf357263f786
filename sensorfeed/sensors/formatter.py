"""Output formatter: builds the JSON envelope served to the downstream client."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sensorfeed.sensors.catalog import CATEGORIES, OTHER_CATEGORY, SensorKey, category_of
from sensorfeed.sensors.normalizer import NormalizedValue

SHAPES = ("flat", "categorized")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Return *now* (default: the current time) as an ISO-8601 UTC string."""
    moment = now or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def categorize(sensors: Mapping[SensorKey, NormalizedValue]) -> Dict[str, Dict[SensorKey, NormalizedValue]]:
    """Group *sensors* by category.

    Categories come out in their fixed order with ``other`` last; a category
    with no readings is left out entirely rather than mapped to ``{}``.
    """
    grouped: Dict[str, Dict[SensorKey, NormalizedValue]] = {}
    for category, members in CATEGORIES.items():
        values = {key: sensors[key] for key in members if key in sensors}
        if values:
            grouped[category] = values

    other = {
        key: value
        for key, value in sensors.items()
        if category_of(key) == OTHER_CATEGORY
    }
    if other:
        grouped[OTHER_CATEGORY] = other
    return grouped


def format_snapshot(
    sensors: Mapping[SensorKey, NormalizedValue],
    *,
    source: str,
    shape: str = "categorized",
    timestamp: Optional[str] = None,
    note: Optional[str] = None,
    raw: Optional[Mapping[SensorKey, Optional[str]]] = None,
    provenance: Optional[Mapping[SensorKey, str]] = None,
) -> Dict[str, Any]:
    """Build a success envelope.

    Args:
        sensors: Normalized readings keyed by sensor.
        source: Tag naming where the data came from.
        shape: ``flat`` for a plain key -> value map, ``categorized`` to
            group readings by category.
        timestamp: ISO-8601 string; the current time when omitted.
        note: Optional human-readable remark (e.g. defaults were used).
        raw: Optional raw strings per key, included as ``raw_sensors``.
        provenance: Optional resolution origin per key.

    Raises:
        ValueError: If *shape* is not one of :data:`SHAPES`.
    """
    if shape not in SHAPES:
        raise ValueError(f"Unknown output shape {shape!r}; expected one of {SHAPES}")

    body: Dict[str, Any] = {
        "timestamp": timestamp or utc_timestamp(),
        "status": "success",
        "source": source,
        "sensors": dict(sensors) if shape == "flat" else categorize(sensors),
    }
    if raw is not None:
        body["raw_sensors"] = dict(raw)
    if provenance is not None:
        body["provenance"] = dict(provenance)
    if note:
        body["note"] = note
    return body


def format_error(message: str, timestamp: Optional[str] = None) -> Dict[str, Any]:
    """Build an error envelope; it never carries a ``sensors`` field."""
    return {
        "timestamp": timestamp or utc_timestamp(),
        "status": "error",
        "error": message,
    }
