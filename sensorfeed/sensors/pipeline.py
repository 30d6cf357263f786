"""Extraction pipeline — one fetched page in, one formatted snapshot out.

``build_snapshot`` chains the synchronous stages:

    candidates → pattern extraction → fallback resolution → normalization → formatting

It performs no I/O; the page is fetched by the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from sensorfeed.scraper.models import PageContent
from sensorfeed.sensors.candidates import select_candidates
from sensorfeed.sensors.catalog import SENSOR_KEYS, SensorKey
from sensorfeed.sensors.formatter import format_snapshot
from sensorfeed.sensors.normalizer import normalize_reading, normalize_value
from sensorfeed.sensors.patterns import extract_from_candidates
from sensorfeed.sensors.resolver import Resolution, fallback_note, resolve_readings

logger = logging.getLogger(__name__)


def resolve_page(
    page: PageContent,
    defaults: Mapping[SensorKey, str],
    max_length: int = 100,
) -> Dict[SensorKey, Resolution]:
    """Run the candidate and full-text passes over *page* for all 14 sensors."""
    candidates = select_candidates(page, max_length)
    found = extract_from_candidates(candidates)
    logger.info(
        "Pattern pass: %d candidates, %d/%d sensors matched",
        len(candidates),
        len(found),
        len(SENSOR_KEYS),
    )
    return resolve_readings(found, page.full_text, defaults)


def normalize_resolutions(
    resolutions: Mapping[SensorKey, Resolution],
    defaults: Mapping[SensorKey, str],
) -> Dict[SensorKey, Resolution]:
    """Swap page values that do not normalize for the key's default.

    A reading such as ``"N/A"`` normalizes to ``None``; the default is used
    instead so the output never carries a null where a default exists.
    """
    settled: Dict[SensorKey, Resolution] = {}
    for key, res in resolutions.items():
        default = defaults.get(key)
        if res.from_page and default is not None and normalize_value(key, res.raw) is None:
            logger.warning("%s: unparseable value %r, using default %s", key, res.raw, default)
            res = Resolution(key, default, "defaulted")
        settled[key] = res
    return settled


def build_snapshot(
    page: PageContent,
    *,
    defaults: Mapping[SensorKey, str],
    source: str,
    shape: str = "categorized",
    max_length: int = 100,
    note_threshold: float = 0.5,
    include_details: bool = True,
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """Turn *page* into a success envelope.

    Every sensor key is present in the result; keys the page did not yield
    carry their default.  A ``note`` is attached when the share of defaulted
    keys exceeds *note_threshold* or when nothing came from the page at all.
    """
    resolutions = normalize_resolutions(resolve_page(page, defaults, max_length), defaults)

    raw = {key: res.raw for key, res in resolutions.items()}
    sensors = normalize_reading(raw)
    note = fallback_note(resolutions, note_threshold)
    if note:
        logger.warning(note)

    return format_snapshot(
        sensors,
        source=source,
        shape=shape,
        timestamp=timestamp,
        note=note,
        raw=raw if include_details else None,
        provenance={key: res.origin for key, res in resolutions.items()} if include_details else None,
    )


def build_fallback_snapshot(
    defaults: Mapping[SensorKey, str],
    *,
    shape: str = "categorized",
    include_details: bool = True,
    note: str = "Using fallback data due to scraping error",
    timestamp: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a snapshot made purely of default values, tagged ``fallback_static``."""
    raw = {key: defaults.get(key) for key in SENSOR_KEYS}
    return format_snapshot(
        normalize_reading(raw),
        source="fallback_static",
        shape=shape,
        timestamp=timestamp,
        note=note,
        raw=raw if include_details else None,
        provenance={key: "defaulted" if raw[key] is not None else "missing" for key in SENSOR_KEYS}
        if include_details
        else None,
    )
