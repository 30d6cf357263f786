"""Per-sensor pattern table and the first pass of the extraction pipeline.

Every sensor is described by one :class:`SensorRule`:

* ``triggers``: regexes that identify an element as *mentioning* the sensor
  (Indonesian and English labels), tried in order;
* ``value``: the regex that pulls the reading out of that text;
* ``render``: turns a ``value`` match into the canonical raw string, e.g.
  ``"1011.8 mbar"``.

:func:`extract_from_candidates` walks the candidate elements in document
order and keeps the first reading found for each sensor.  The same rules
drive the full-text pass in :mod:`sensorfeed.sensors.resolver`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Match, Optional, Pattern, Tuple

from sensorfeed.scraper.models import ElementRecord
from sensorfeed.sensors.catalog import COMPASS_DIRECTIONS, SensorKey

logger = logging.getLogger(__name__)

# A reading: digits with an optional decimal part (dot or comma), not glued
# to a preceding digit or separator so "1,011.8" never yields "011.8".
_NUM = r"(?<![\d.,])(\d+(?:[.,]\d+)?)"

_COMPASS = "|".join(name.replace(" ", r"\s+") for name in COMPASS_DIRECTIONS)

_DEGREES = re.compile(_NUM + r"\s*°(?!\s*C\b)", re.IGNORECASE)
_COMPASS_NAME = re.compile(r"\b(" + _COMPASS + r")\b", re.IGNORECASE)


def _number(match: Match[str], group: int = 1) -> str:
    return match.group(group).replace(",", ".")


def canonical_compass(name: str) -> str:
    """Return the canonical capitalisation of a compass name, e.g. ``"barat  daya"`` -> ``"Barat Daya"``."""
    return " ".join(word.capitalize() for word in name.split())


def _p(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# ---------------------------------------------------------------------------
# Rule record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SensorRule:
    key: SensorKey
    triggers: Tuple[Pattern[str], ...]
    value: Pattern[str]
    render: Callable[[Match[str]], str]
    extractor: Optional[Callable[[str], Optional[str]]] = None

    def mentioned_in(self, text: str) -> bool:
        return any(trigger.search(text) for trigger in self.triggers)

    def extract_mentioned(self, text: str) -> Optional[str]:
        """Extract from *text* if a trigger matches it, trying triggers in order."""
        for trigger in self.triggers:
            match = trigger.search(text)
            if match is None:
                continue
            raw = self.extract(text, match.start())
            if raw is not None:
                return raw
        return None

    def extract(self, text: str, start: int = 0) -> Optional[str]:
        """Pull this sensor's raw reading out of *text*.

        The text from *start* (normally where the trigger matched) is tried
        first so that a label is paired with the value that follows it;
        when nothing follows, the whole text is searched.
        """
        for segment in (text[start:], text) if start else (text,):
            if self.extractor is not None:
                raw = self.extractor(segment)
            else:
                match = self.value.search(segment)
                raw = self.render(match) if match else None
            if raw is not None:
                return raw
        return None


def _simple(key: SensorKey, triggers: Iterable[str], value: str, unit: str) -> SensorRule:
    """Build a rule whose raw form is ``"<number> <unit>"``."""
    return SensorRule(
        key=key,
        triggers=_p(*triggers),
        value=re.compile(_NUM + value, re.IGNORECASE),
        render=lambda m: f"{_number(m)}{unit}",
    )


# ---------------------------------------------------------------------------
# Wind direction: needs both a degree figure and a compass name
# ---------------------------------------------------------------------------

def extract_wind_direction(text: str) -> Optional[str]:
    """Return ``"<degrees>° <Compass>"`` when *text* holds both parts, else ``None``.

    >>> extract_wind_direction("138°Tenggara")
    '138° Tenggara'
    """
    degrees = _DEGREES.search(text)
    compass = _COMPASS_NAME.search(text)
    if degrees is None or compass is None:
        return None
    return f"{_number(degrees)}° {canonical_compass(compass.group(1))}"


def _render_wind(match: Match[str]) -> str:
    return f"{_number(match)}° {canonical_compass(match.group(2))}"


def _render_oxygen(match: Match[str]) -> str:
    if match.group(2):
        return f"{_number(match)} %VOL"
    return f"{_number(match)}%"


# ---------------------------------------------------------------------------
# The table
# ---------------------------------------------------------------------------

SENSOR_RULES: Tuple[SensorRule, ...] = (
    _simple(
        "suhu_udara",
        [r"suhu\s+udara", r"temperature", r"\bsuhu\b"],
        r"\s*°\s*C",
        "°C",
    ),
    SensorRule(
        key="tekanan_udara",
        triggers=_p(r"tekanan\s+udara", r"pressure", r"\btekanan\b"),
        value=re.compile(_NUM + r"\s*(mbar|hPa)\b", re.IGNORECASE),
        render=lambda m: f"{_number(m)} {m.group(2)}",
    ),
    _simple(
        "curah_hujan",
        [r"curah\s+hujan", r"rainfall", r"\bhujan\b"],
        r"\s*mm\b",
        " mm",
    ),
    SensorRule(
        key="arah_angin",
        triggers=_p(r"arah\s+angin", r"wind\s+direction"),
        value=re.compile(
            _NUM + r"\s*°(?!\s*C\b)[\s\S]{0,40}?\b(" + _COMPASS + r")\b",
            re.IGNORECASE,
        ),
        render=_render_wind,
        extractor=extract_wind_direction,
    ),
    _simple(
        "kelembaban_udara",
        [r"kelembaban", r"kelembapan", r"humidity"],
        r"\s*%(?!\s*VOL)",
        "%",
    ),
    _simple(
        "kecepatan_angin",
        [r"kecepatan\s+angin", r"wind\s+speed"],
        r"\s*m/s",
        " m/s",
    ),
    _simple(
        "radiasi_matahari",
        [r"radiasi\s+matahari", r"solar\s+radiation", r"\bradiasi\b"],
        r"\s*W/m",
        " W/m²",
    ),
    _simple(
        "karbon_dioksida",
        [r"karbon\s+dioksida", r"\bco\s*[2₂]", r"carbon\s+dioxide"],
        r"\s*ppm\b",
        " ppm",
    ),
    SensorRule(
        key="oksigen",
        triggers=_p(r"oksigen", r"oxygen"),
        value=re.compile(_NUM + r"\s*%\s*(VOL)?", re.IGNORECASE),
        render=_render_oxygen,
    ),
    _simple(
        "gas_ozone",
        [r"gas\s+ozone", r"\bo\s*[3₃]\b", r"ozone?"],
        r"\s*ppm\b",
        " ppm",
    ),
    _simple(
        "nitrogen_dioksida",
        [r"nitrogen\s+dioksida", r"\bno\s*[2₂]", r"nitrogen\s+dioxide"],
        r"\s*ppm\b",
        " ppm",
    ),
    _simple(
        "sulfur_dioksida",
        [r"sulfur\s+dioksida", r"\bso\s*[2₂]", r"sulfur\s+dioxide"],
        r"\s*ppm\b",
        " ppm",
    ),
    _simple(
        "partikulat_materi_2_5",
        [r"partikulat\s+materi\s+2[.,]5", r"\bpm\s*2[.,]5", r"\bpm25\b"],
        r"\s*[uµμ]g\s*/\s*m(?:³|3)",
        " ug/m³",
    ),
    _simple(
        "partikulat_materi_10",
        [r"partikulat\s+materi\s+10", r"\bpm\s*10\b"],
        r"\s*[uµμ]g\s*/\s*m(?:³|3)",
        " ug/m³",
    ),
)

RULES_BY_KEY: Dict[SensorKey, SensorRule] = {rule.key: rule for rule in SENSOR_RULES}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_from_candidates(
    candidates: Iterable[ElementRecord],
    rules: Iterable[SensorRule] = SENSOR_RULES,
) -> Dict[SensorKey, str]:
    """Resolve as many sensors as possible from the candidate elements.

    Candidates are visited in document order; for each one every still
    unresolved rule checks its triggers and, on a hit, extracts from the
    same element's text.  The first successful extraction for a key wins.
    A trigger hit without a readable value simply leaves the key open.

    Returns:
        Mapping of sensor key to raw reading string for the keys found.
    """
    pending: List[SensorRule] = list(rules)
    found: Dict[SensorKey, str] = {}

    for element in candidates:
        if not pending:
            break
        text = element.text
        for rule in list(pending):
            raw = rule.extract_mentioned(text)
            if raw is None:
                continue
            found[rule.key] = raw
            pending.remove(rule)
            logger.debug("%s: %s (from %r)", rule.key, raw, text[:50])

    return found
