"""Value normalizer: raw reading strings -> typed values.

Numeric sensors become floats with their unit stripped; wind direction
becomes a canonical compass label.  Nothing here raises on bad input: an
unparseable number becomes ``None``.
"""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional, Union

from sensorfeed.sensors.catalog import DIRECTION_ALIASES, WIND_DIRECTION, SensorKey

NormalizedValue = Union[float, str, None]

# parseFloat semantics: optional leading whitespace and sign, then digits
# with at most one decimal point.  Anything after the number is ignored.
_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def parse_number(value: object) -> Optional[float]:
    """Parse the leading number of *value*.

    >>> parse_number("33.6°C")
    33.6
    >>> parse_number("N/A") is None
    True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    match = _LEADING_NUMBER.match(value)
    if match is None:
        return None
    return float(match.group(1))


def normalize_wind_direction(value: object) -> NormalizedValue:
    """Map *value* to one of the eight canonical compass labels.

    Matching is a case-insensitive substring search, compound directions
    first.  Strings without a recognisable direction are returned unchanged.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return str(value)
    lowered = value.lower()
    for token, label in DIRECTION_ALIASES:
        if token in lowered:
            return label
    return value


def normalize_value(key: SensorKey, value: object) -> NormalizedValue:
    """Normalize a single raw reading for sensor *key*."""
    if key == WIND_DIRECTION:
        return normalize_wind_direction(value)
    return parse_number(value)


def normalize_reading(raw: Mapping[SensorKey, object]) -> Dict[SensorKey, NormalizedValue]:
    """Normalize every entry of *raw*, preserving key order."""
    return {key: normalize_value(key, value) for key, value in raw.items()}
