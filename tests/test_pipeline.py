"""Tests for the extraction pipeline and the snapshot service."""

from __future__ import annotations

from dataclasses import replace

import pytest

from sensorfeed.config import DEFAULT_SENSOR_VALUES, settings
from sensorfeed.errors import FetchError
from sensorfeed.scraper.models import ElementRecord, PageContent
from sensorfeed.sensors.catalog import SENSOR_KEYS
from sensorfeed.sensors.pipeline import (
    build_fallback_snapshot,
    build_snapshot,
    normalize_resolutions,
    resolve_page,
)
from sensorfeed.sensors.resolver import Resolution
from sensorfeed.sensors.service import SensorService

_TS = "2024-05-01T08:00:00Z"


def _flat(page: PageContent, **kwargs) -> dict:
    kwargs.setdefault("defaults", DEFAULT_SENSOR_VALUES)
    kwargs.setdefault("source", "browser_render")
    return build_snapshot(page, shape="flat", timestamp=_TS, **kwargs)


# ---------------------------------------------------------------------------
# build_snapshot
# ---------------------------------------------------------------------------

class TestBuildSnapshot:
    def test_dashboard_fully_resolved(self, dashboard_page, expected_sensors) -> None:
        body = _flat(dashboard_page)

        assert body["status"] == "success"
        assert body["source"] == "browser_render"
        assert body["sensors"] == expected_sensors
        assert "note" not in body
        assert set(body["provenance"].values()) == {"resolved"}
        assert body["raw_sensors"]["arah_angin"] == "138° Tenggara"

    def test_every_key_present(self, dashboard_page) -> None:
        body = _flat(dashboard_page)
        assert list(body["sensors"]) == list(SENSOR_KEYS)

    def test_categorized_by_default(self, dashboard_page) -> None:
        body = build_snapshot(
            dashboard_page, defaults=DEFAULT_SENSOR_VALUES, source="browser_render"
        )
        assert body["sensors"]["weather"]["suhu_udara"] == 33.6
        assert body["sensors"]["particulate"]["partikulat_materi_10"] == 30.0

    def test_repeat_runs_identical(self, dashboard_page) -> None:
        assert _flat(dashboard_page) == _flat(dashboard_page)

    def test_empty_page_all_defaults(self, empty_page) -> None:
        body = _flat(empty_page)

        assert body["status"] == "success"
        assert body["sensors"]["tekanan_udara"] == 1013.2
        assert body["sensors"]["arah_angin"] == "Tenggara"
        assert body["note"] == "Using fallback data: no sensor readings found on page"
        assert set(body["provenance"].values()) == {"defaulted"}

    def test_partial_page_notes_defaulted_share(self) -> None:
        page = PageContent(
            title="Dash",
            full_text="Suhu Udara\n31°C",
            visible_elements=(ElementRecord(tag="DIV", text="Suhu Udara 31°C"),),
        )
        body = _flat(page)

        assert body["sensors"]["suhu_udara"] == 31.0
        assert body["provenance"]["suhu_udara"] == "resolved"
        assert body["note"] == "13 of 14 sensors using default values"

    def test_split_label_value_resolved_from_full_text(self) -> None:
        page = PageContent(
            title="Dash",
            full_text="Curah Hujan\n\n4.2 mm",
            visible_elements=(
                ElementRecord(tag="SPAN", text="Curah Hujan"),
                ElementRecord(tag="SPAN", text="4.2"),
            ),
        )
        body = _flat(page)
        assert body["sensors"]["curah_hujan"] == 4.2
        assert body["provenance"]["curah_hujan"] == "fallback"

    def test_details_can_be_left_out(self, dashboard_page) -> None:
        body = _flat(dashboard_page, include_details=False)
        assert "raw_sensors" not in body
        assert "provenance" not in body

    def test_missing_default_gives_none(self, empty_page) -> None:
        defaults = dict(DEFAULT_SENSOR_VALUES)
        del defaults["gas_ozone"]
        body = _flat(empty_page, defaults=defaults)
        assert body["sensors"]["gas_ozone"] is None
        assert body["provenance"]["gas_ozone"] == "missing"

    def test_resolve_page_respects_length_ceiling(self, dashboard_page) -> None:
        # With a tiny ceiling no card qualifies, so everything comes from
        # the full-text pass.
        resolutions = resolve_page(dashboard_page, DEFAULT_SENSOR_VALUES, max_length=3)
        assert {r.origin for r in resolutions.values()} == {"fallback"}


class TestNormalizeResolutions:
    def test_unparseable_page_value_replaced_by_default(self) -> None:
        resolutions = {
            "suhu_udara": Resolution("suhu_udara", "N/A", "resolved"),
            "curah_hujan": Resolution("curah_hujan", "2 mm", "fallback"),
        }
        settled = normalize_resolutions(resolutions, DEFAULT_SENSOR_VALUES)

        assert settled["suhu_udara"] == Resolution("suhu_udara", "28.5°C", "defaulted")
        assert settled["curah_hujan"] == resolutions["curah_hujan"]

    def test_no_default_leaves_value(self) -> None:
        resolutions = {"gas_ozone": Resolution("gas_ozone", "N/A", "resolved")}
        assert normalize_resolutions(resolutions, {}) == resolutions

    def test_unknown_wind_string_kept(self) -> None:
        resolutions = {"arah_angin": Resolution("arah_angin", "Calm", "resolved")}
        assert normalize_resolutions(resolutions, DEFAULT_SENSOR_VALUES) == resolutions


class TestBuildFallbackSnapshot:
    def test_static_fallback(self) -> None:
        body = build_fallback_snapshot(DEFAULT_SENSOR_VALUES, shape="flat", timestamp=_TS)
        assert body["source"] == "fallback_static"
        assert body["note"] == "Using fallback data due to scraping error"
        assert body["sensors"]["suhu_udara"] == 28.5
        assert list(body["sensors"]) == list(SENSOR_KEYS)


# ---------------------------------------------------------------------------
# SensorService
# ---------------------------------------------------------------------------

class _FakeFetcher:
    def __init__(self, page=None, error=None) -> None:
        self.page = page
        self.error = error
        self.calls = []

    def __call__(self, url: str, timeout: float) -> PageContent:
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.page


@pytest.fixture()
def config():
    return replace(
        settings,
        target_url="https://dashboard.example.com/dashboard",
        request_timeout=5.0,
        cache_ttl=30.0,
        output_shape="flat",
        fallback_on_fetch_error=False,
    )


class TestSensorService:
    def test_fetches_with_configured_url_and_timeout(self, config, dashboard_page) -> None:
        fetcher = _FakeFetcher(page=dashboard_page)
        service = SensorService(config, fetcher=fetcher, clock=lambda: 0.0)

        body = service.fetch_sensor_snapshot()

        assert fetcher.calls == [("https://dashboard.example.com/dashboard", 5.0)]
        assert body["status"] == "success"
        assert body["sensors"]["suhu_udara"] == 33.6

    def test_second_call_served_from_cache(self, config, dashboard_page) -> None:
        fetcher = _FakeFetcher(page=dashboard_page)
        service = SensorService(config, fetcher=fetcher, clock=lambda: 0.0)

        first = service.fetch_sensor_snapshot()
        second = service.fetch_sensor_snapshot()

        assert len(fetcher.calls) == 1
        assert second is first

    def test_cold_fetch_error_gives_error_envelope(self, config) -> None:
        fetcher = _FakeFetcher(error=FetchError("HTTP 503 while fetching x"))
        service = SensorService(config, fetcher=fetcher, clock=lambda: 0.0)

        body = service.fetch_sensor_snapshot()

        assert body["status"] == "error"
        assert body["error"] == "HTTP 503 while fetching x"
        assert "sensors" not in body

    def test_unexpected_fetch_exception_is_wrapped(self, config) -> None:
        fetcher = _FakeFetcher(error=RuntimeError("browser crashed"))
        service = SensorService(config, fetcher=fetcher, clock=lambda: 0.0)

        with pytest.raises(FetchError, match="browser crashed"):
            service.run_pipeline()
        assert service.fetch_sensor_snapshot()["status"] == "error"

    def test_fetch_error_after_success_serves_stale(self, config, dashboard_page) -> None:
        now = [0.0]
        fetcher = _FakeFetcher(page=dashboard_page)
        service = SensorService(config, fetcher=fetcher, clock=lambda: now[0])
        service.fetch_sensor_snapshot()

        fetcher.error = FetchError("timeout")
        now[0] = 120.0
        body = service.fetch_sensor_snapshot()

        assert body["status"] == "success"
        assert body["cached"] is True
        assert body["sensors"]["suhu_udara"] == 33.6

    def test_static_fallback_when_enabled(self, config) -> None:
        config = replace(config, fallback_on_fetch_error=True)
        fetcher = _FakeFetcher(error=FetchError("timeout"))
        service = SensorService(config, fetcher=fetcher, clock=lambda: 0.0)

        body = service.fetch_sensor_snapshot()

        assert body["status"] == "success"
        assert body["source"] == "fallback_static"
        assert body["note"] == "Using fallback data due to scraping error"
