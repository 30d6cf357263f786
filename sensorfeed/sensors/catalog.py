"""The fixed sensor vocabulary: keys, categories, units and compass names."""

from __future__ import annotations

from typing import Dict, Tuple

SensorKey = str

SENSOR_KEYS: Tuple[SensorKey, ...] = (
    "suhu_udara",
    "tekanan_udara",
    "curah_hujan",
    "arah_angin",
    "kelembaban_udara",
    "kecepatan_angin",
    "radiasi_matahari",
    "karbon_dioksida",
    "oksigen",
    "gas_ozone",
    "nitrogen_dioksida",
    "sulfur_dioksida",
    "partikulat_materi_2_5",
    "partikulat_materi_10",
)

WIND_DIRECTION: SensorKey = "arah_angin"

# Category name -> member keys, in output order.  Anything not listed here
# lands in ``other``.
CATEGORIES: Dict[str, Tuple[SensorKey, ...]] = {
    "weather": (
        "suhu_udara",
        "tekanan_udara",
        "curah_hujan",
        "arah_angin",
        "kelembaban_udara",
        "kecepatan_angin",
    ),
    "radiation": ("radiasi_matahari",),
    "air_quality": (
        "karbon_dioksida",
        "oksigen",
        "gas_ozone",
        "nitrogen_dioksida",
        "sulfur_dioksida",
    ),
    "particulate": ("partikulat_materi_2_5", "partikulat_materi_10"),
}

OTHER_CATEGORY = "other"

# Canonical compass labels.  Longest names first so that "Barat Daya" is
# never reported as plain "Barat".
COMPASS_DIRECTIONS: Tuple[str, ...] = (
    "Barat Daya",
    "Barat Laut",
    "Timur Laut",
    "Tenggara",
    "Selatan",
    "Utara",
    "Timur",
    "Barat",
)

# Lower-case token -> canonical label, checked in order.
DIRECTION_ALIASES: Tuple[Tuple[str, str], ...] = (
    ("barat daya", "Barat Daya"),
    ("barat laut", "Barat Laut"),
    ("timur laut", "Timur Laut"),
    ("tenggara", "Tenggara"),
    ("southwest", "Barat Daya"),
    ("northwest", "Barat Laut"),
    ("northeast", "Timur Laut"),
    ("southeast", "Tenggara"),
    ("selatan", "Selatan"),
    ("utara", "Utara"),
    ("timur", "Timur"),
    ("barat", "Barat"),
    ("south", "Selatan"),
    ("north", "Utara"),
    ("east", "Timur"),
    ("west", "Barat"),
)

SENSOR_UNITS: Dict[SensorKey, str] = {
    "suhu_udara": "°C",
    "tekanan_udara": "hPa",
    "curah_hujan": "mm",
    "arah_angin": "",
    "kelembaban_udara": "%",
    "kecepatan_angin": "m/s",
    "radiasi_matahari": "W/m²",
    "karbon_dioksida": "ppm",
    "oksigen": "%",
    "gas_ozone": "ppm",
    "nitrogen_dioksida": "ppm",
    "sulfur_dioksida": "ppm",
    "partikulat_materi_2_5": "µg/m³",
    "partikulat_materi_10": "µg/m³",
}

SENSOR_LABELS: Dict[SensorKey, str] = {
    "suhu_udara": "Suhu Udara",
    "tekanan_udara": "Tekanan Udara",
    "curah_hujan": "Curah Hujan",
    "arah_angin": "Arah Angin",
    "kelembaban_udara": "Kelembaban Udara",
    "kecepatan_angin": "Kecepatan Angin",
    "radiasi_matahari": "Radiasi Matahari",
    "karbon_dioksida": "Karbon Dioksida",
    "oksigen": "Oksigen",
    "gas_ozone": "Gas Ozone",
    "nitrogen_dioksida": "Nitrogen Dioksida",
    "sulfur_dioksida": "Sulfur Dioksida",
    "partikulat_materi_2_5": "PM2.5",
    "partikulat_materi_10": "PM10",
}


def sensor_label(key: SensorKey) -> str:
    """Return the display name for *key*, title-casing unknown keys."""
    if key in SENSOR_LABELS:
        return SENSOR_LABELS[key]
    return " ".join(part.capitalize() for part in key.split("_"))


def category_of(key: SensorKey) -> str:
    """Return the category *key* belongs to, or ``other``."""
    for category, members in CATEGORIES.items():
        if key in members:
            return category
    return OTHER_CATEGORY
