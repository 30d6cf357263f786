"""Centralised settings for the sensor feed.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  Settings are read once
at startup; nothing in the pipeline mutates them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


# Raw values substituted for any sensor the page did not yield.  They go
# through the same normalizer as scraped strings.
DEFAULT_SENSOR_VALUES: dict[str, str] = {
    "suhu_udara": "28.5°C",
    "tekanan_udara": "1013.2 mbar",
    "curah_hujan": "0 mm",
    "arah_angin": "135° Tenggara",
    "kelembaban_udara": "65.0%",
    "kecepatan_angin": "2.5 m/s",
    "radiasi_matahari": "850.0 W/m²",
    "karbon_dioksida": "450 ppm",
    "oksigen": "21 %VOL",
    "gas_ozone": "0.05 ppm",
    "nitrogen_dioksida": "0.02 ppm",
    "sulfur_dioksida": "0.01 ppm",
    "partikulat_materi_2_5": "15 ug/m³",
    "partikulat_materi_10": "25 ug/m³",
}


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Page fetch
    # ------------------------------------------------------------------
    target_url: str = field(
        default_factory=lambda: os.environ.get(
            "SENSOR_TARGET_URL", "https://pju-monitoring-web-pens.vercel.app/dashboard"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    render_settle_delay: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_SETTLE_DELAY", "5.0"))
    )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    cache_ttl: float = field(
        default_factory=lambda: float(os.environ.get("CACHE_TTL", "30.0"))
    )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    candidate_max_length: int = field(
        default_factory=lambda: int(os.environ.get("CANDIDATE_MAX_LENGTH", "100"))
    )
    sensor_defaults: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SENSOR_VALUES)
    )
    default_note_threshold: float = field(
        default_factory=lambda: float(os.environ.get("DEFAULT_NOTE_THRESHOLD", "0.5"))
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_shape: str = field(
        default_factory=lambda: os.environ.get("OUTPUT_SHAPE", "categorized")
    )
    source_tag: str = field(
        default_factory=lambda: os.environ.get("SOURCE_TAG", "browser_render")
    )
    include_details: bool = field(
        default_factory=lambda: _env_bool("INCLUDE_DETAILS", "true")
    )
    fallback_on_fetch_error: bool = field(
        default_factory=lambda: _env_bool("FALLBACK_ON_FETCH_ERROR", "false")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )


# Module-level singleton; import this everywhere:
#   from sensorfeed.config import settings
settings = Settings()
