"""Fallback resolver: second pass over the full page text, then defaults.

Labels and values on the dashboard often live in sibling elements, so a key
the candidate pass missed may still be readable from the page text, where
the label is followed by its value a line or two later.  Whatever is still
unresolved after that gets the configured default.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Pattern

from sensorfeed.sensors.catalog import SENSOR_KEYS, SensorKey
from sensorfeed.sensors.patterns import RULES_BY_KEY, SensorRule

logger = logging.getLogger(__name__)

Origin = Literal["resolved", "fallback", "defaulted", "missing"]

# Maximum characters allowed between a label and its value in the page text.
LABEL_VALUE_GAP = 80


@dataclass(frozen=True)
class Resolution:
    """How one sensor's raw value was obtained.

    ``origin`` is ``resolved`` for a hit in the candidate pass, ``fallback``
    for a hit in the full-text pass, ``defaulted`` when the default table
    supplied the value and ``missing`` when not even a default exists.
    """

    key: SensorKey
    raw: Optional[str]
    origin: Origin

    @property
    def from_page(self) -> bool:
        return self.origin in ("resolved", "fallback")


def _label_value_patterns(rule: SensorRule) -> List[Pattern[str]]:
    """Join each trigger to the rule's value pattern across a bounded gap.

    The gap may not run into another sensor's label, so a placeholder such
    as ``"--"`` never borrows the next sensor's reading.
    """
    others = "|".join(
        "(?:%s)" % trigger.pattern
        for other in RULES_BY_KEY.values()
        if other.key != rule.key
        for trigger in other.triggers
    )
    gap = r"(?:(?!%s)[\s\S]){0,%d}?" % (others, LABEL_VALUE_GAP)
    return [
        re.compile(trigger.pattern + gap + rule.value.pattern, re.IGNORECASE)
        for trigger in rule.triggers
    ]


_FULL_TEXT_PATTERNS: Dict[SensorKey, List[Pattern[str]]] = {
    key: _label_value_patterns(rule) for key, rule in RULES_BY_KEY.items()
}


def search_full_text(key: SensorKey, full_text: str) -> Optional[str]:
    """Look for *key*'s label followed by its value anywhere in *full_text*."""
    rule = RULES_BY_KEY.get(key)
    if rule is None or not full_text:
        return None
    for pattern in _FULL_TEXT_PATTERNS[key]:
        match = pattern.search(full_text)
        if match is None:
            continue
        # The value groups sit after the trigger's own groups; re-run the
        # value regex on the matched span so render() sees its own groups.
        value = rule.value.search(full_text, match.start(), match.end())
        if value is None:
            continue
        return rule.render(value)
    return None


def resolve_readings(
    found: Mapping[SensorKey, str],
    full_text: str,
    defaults: Mapping[SensorKey, str],
    keys: Iterable[SensorKey] = SENSOR_KEYS,
) -> Dict[SensorKey, Resolution]:
    """Produce a :class:`Resolution` for every sensor key.

    Args:
        found: Raw readings from the candidate pass.
        full_text: The page's complete visible text.
        defaults: Raw default value per key.
        keys: Keys to resolve; all 14 sensors by default.

    Returns:
        Mapping of key to resolution, in *keys* order.
    """
    resolutions: Dict[SensorKey, Resolution] = {}
    for key in keys:
        if found.get(key) is not None:
            resolutions[key] = Resolution(key, found[key], "resolved")
            continue

        raw = search_full_text(key, full_text)
        if raw is not None:
            logger.debug("%s: %s (full-text pass)", key, raw)
            resolutions[key] = Resolution(key, raw, "fallback")
            continue

        default = defaults.get(key)
        if default is not None:
            logger.debug("%s: using default %s", key, default)
            resolutions[key] = Resolution(key, default, "defaulted")
        else:
            logger.warning("%s: no reading and no default configured", key)
            resolutions[key] = Resolution(key, None, "missing")

    return resolutions


def defaulted_share(resolutions: Mapping[SensorKey, Resolution]) -> float:
    """Fraction of resolutions that did not come from the page."""
    if not resolutions:
        return 0.0
    guessed = sum(1 for r in resolutions.values() if not r.from_page)
    return guessed / len(resolutions)


def fallback_note(
    resolutions: Mapping[SensorKey, Resolution], threshold: float
) -> Optional[str]:
    """Return a human-readable note when too many values are guesses.

    ``None`` when the page supplied enough readings.
    """
    if not resolutions:
        return None
    if not any(r.from_page for r in resolutions.values()):
        return "Using fallback data: no sensor readings found on page"
    share = defaulted_share(resolutions)
    if share > threshold:
        guessed = sum(1 for r in resolutions.values() if not r.from_page)
        return f"{guessed} of {len(resolutions)} sensors using default values"
    return None
