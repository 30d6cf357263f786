"""Utilities for rendering sensor snapshots in the CLI."""

from __future__ import annotations

from typing import Any, Dict, List

from sensorfeed.scraper.models import ElementRecord
from sensorfeed.sensors.catalog import CATEGORIES, OTHER_CATEGORY, SENSOR_UNITS, category_of, sensor_label
from sensorfeed.sensors.patterns import SENSOR_RULES

_CATEGORY_TITLES = {
    "weather": "Weather",
    "radiation": "Radiation",
    "air_quality": "Air Quality",
    "particulate": "Particulate",
    OTHER_CATEGORY: "Other Sensors",
}

_RULE = "═" * 60


def _flatten(sensors: Dict[str, Any]) -> Dict[str, Any]:
    """Accept either output shape and return a flat key -> value map."""
    if any(isinstance(v, dict) for v in sensors.values()):
        flat: Dict[str, Any] = {}
        for group in sensors.values():
            flat.update(group)
        return flat
    return dict(sensors)


def render_snapshot(snapshot: Dict[str, Any]) -> str:
    """Render a snapshot envelope as a readable, category-grouped report.

    Args:
        snapshot: A success or error envelope from the service.

    Returns:
        Multi-line string, one sensor per line with its unit.
    """
    lines: List[str] = [_RULE]
    if snapshot.get("status") != "success":
        lines.append("Status    : error")
        lines.append(f"Error     : {snapshot.get('error', '(unknown)')}")
        lines.append(_RULE)
        return "\n".join(lines)

    lines.append("Status    : success")
    lines.append(f"Timestamp : {snapshot.get('timestamp', '')}")
    lines.append(f"Source    : {snapshot.get('source', '')}")
    if snapshot.get("cached"):
        lines.append("Cached    : yes")
    if snapshot.get("note"):
        lines.append(f"Note      : {snapshot['note']}")

    sensors = _flatten(snapshot.get("sensors", {}))
    provenance = snapshot.get("provenance", {})

    for category in [*CATEGORIES, OTHER_CATEGORY]:
        keys = [key for key in sensors if category_of(key) == category]
        if not keys:
            continue
        lines.append("")
        lines.append(f"{_CATEGORY_TITLES[category]}:")
        for key in keys:
            unit = SENSOR_UNITS.get(key, "")
            value = sensors[key]
            shown = "-" if value is None else f"{value} {unit}".rstrip()
            origin = provenance.get(key)
            suffix = f"  ({origin})" if origin and origin != "resolved" else ""
            lines.append(f"  {sensor_label(key)}: {shown}{suffix}")

    lines.append(_RULE)
    return "\n".join(lines)


def render_candidates(candidates: List[ElementRecord]) -> str:
    """List candidate elements with the sensors each one mentions."""
    lines: List[str] = []
    for i, element in enumerate(candidates):
        mentions = [rule.key for rule in SENSOR_RULES if rule.mentioned_in(element.text)]
        tag = element.tag.lower()
        if element.class_name:
            tag += "." + ".".join(element.class_name.split()[:2])
        marker = f"  -> {', '.join(mentions)}" if mentions else ""
        lines.append(f"{i:>3}  <{tag}>  {element.text!r}{marker}")
    return "\n".join(lines)
