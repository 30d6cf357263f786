"""Candidate filter: narrows the page down to elements likely to hold a reading."""

from __future__ import annotations

import re
from typing import List

from sensorfeed.scraper.models import ElementRecord, PageContent

# Bilingual keywords covering every sensor domain, plus unit tokens that only
# appear next to a reading.  Compared against lower-cased text.
SENSOR_KEYWORDS = (
    "suhu", "temperature", "tekanan", "pressure", "curah", "hujan", "rainfall",
    "arah", "angin", "wind", "kelembaban", "humidity", "kecepatan", "speed",
    "radiasi", "radiation", "matahari", "solar", "karbon", "carbon", "co2",
    "oksigen", "oxygen", "ozon", "ozone", "nitrogen", "no2", "sulfur", "so2",
    "partikulat", "particulate", "pm2.5", "pm10", "pm",
    "°c", "mbar", "hpa", "mm", "m/s", "w/m", "ppm", "%vol", "ug/m",
)

_DIGIT = re.compile(r"\d")


def is_candidate_text(text: str, max_length: int) -> bool:
    """Return ``True`` if *text* is short and mentions a number or a sensor keyword."""
    text = text.strip()
    if not text or len(text) >= max_length:
        return False
    if _DIGIT.search(text):
        return True
    lowered = text.lower()
    return any(keyword in lowered for keyword in SENSOR_KEYWORDS)


def select_candidates(page: PageContent, max_length: int) -> List[ElementRecord]:
    """Return the elements of *page* worth running sensor patterns against.

    Elements whose text reaches *max_length* characters are dropped, as are
    elements with neither a digit nor a sensor keyword.  Document order is
    preserved.
    """
    return [el for el in page.visible_elements if is_candidate_text(el.text, max_length)]
