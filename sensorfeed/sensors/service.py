"""Sensor snapshot service: fetch + pipeline behind the read-through cache.

``SensorService.fetch_sensor_snapshot`` is the one operation the HTTP layer
calls per request.  It always returns a JSON-ready envelope; the only error
envelope is produced when the page could not be fetched and nothing has been
cached yet.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from sensorfeed.config import Settings, settings as default_settings
from sensorfeed.errors import FetchError
from sensorfeed.scraper.fetcher import fetch_rendered_page
from sensorfeed.scraper.models import PageContent
from sensorfeed.sensors.cache import SnapshotCache
from sensorfeed.sensors.formatter import format_error
from sensorfeed.sensors.pipeline import build_fallback_snapshot, build_snapshot

logger = logging.getLogger(__name__)

PageFetcher = Callable[[str, float], PageContent]


class SensorService:
    """Owns the snapshot cache and knows how to refill it.

    Args:
        config: Settings to read URL, timeouts, TTL and output options from.
        fetcher: ``(url, timeout) -> PageContent`` collaborator.
        clock: Monotonic clock handed to the cache.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        fetcher: PageFetcher = fetch_rendered_page,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or default_settings
        self._fetcher = fetcher
        self.cache = SnapshotCache(self.run_pipeline, ttl=self.config.cache_ttl, clock=clock)

    def run_pipeline(self) -> Dict[str, Any]:
        """Fetch the page once and turn it into a snapshot.

        Raises:
            FetchError: If the fetch collaborator fails for any reason.
        """
        cfg = self.config
        try:
            page = self._fetcher(cfg.target_url, cfg.request_timeout)
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"Fetching {cfg.target_url} failed: {exc}") from exc

        snapshot = build_snapshot(
            page,
            defaults=cfg.sensor_defaults,
            source=cfg.source_tag,
            shape=cfg.output_shape,
            max_length=cfg.candidate_max_length,
            note_threshold=cfg.default_note_threshold,
            include_details=cfg.include_details,
        )
        logger.info("Snapshot built from %s", cfg.target_url)
        return snapshot

    def fetch_sensor_snapshot(self) -> Dict[str, Any]:
        """Return the current snapshot, from cache when fresh."""
        try:
            return self.cache.get()
        except FetchError as exc:
            if self.config.fallback_on_fetch_error:
                logger.warning("Serving static fallback data: %s", exc)
                return build_fallback_snapshot(
                    self.config.sensor_defaults,
                    shape=self.config.output_shape,
                    include_details=self.config.include_details,
                )
            return format_error(str(exc))
