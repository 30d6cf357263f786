"""Shared fixtures: a server-rendered copy of the monitoring dashboard."""

from __future__ import annotations

import pytest

from sensorfeed.scraper.dom import parse_html
from sensorfeed.scraper.models import PageContent

DASHBOARD_HTML = """\
<!DOCTYPE html>
<html>
<head><title>Environmental Monitoring</title></head>
<body>
  <main>
    <h1>Dashboard Monitoring Lingkungan</h1>
    <div class="grid gap-4">
      <div class="card"><p class="label">Suhu Udara</p><p class="value">33.6°C</p></div>
      <div class="card"><p class="label">Tekanan Udara</p><p class="value">1011.8 mbar</p></div>
      <div class="card"><p class="label">Curah Hujan</p><p class="value">0 mm</p></div>
      <div class="card"><p class="label">Arah Angin</p><p class="value">138°Tenggara</p></div>
      <div class="card"><p class="label">Kelembaban Udara</p><p class="value">70.2%</p></div>
      <div class="card"><p class="label">Kecepatan Angin</p><p class="value">3.1 m/s</p></div>
      <div class="card"><p class="label">Radiasi Matahari</p><p class="value">612.5 W/m²</p></div>
      <div class="card"><p class="label">Karbon Dioksida</p><p class="value">412 ppm</p></div>
      <div class="card"><p class="label">Oksigen</p><p class="value">20.9 %VOL</p></div>
      <div class="card"><p class="label">Gas Ozone</p><p class="value">0.03 ppm</p></div>
      <div class="card"><p class="label">Nitrogen Dioksida</p><p class="value">0.04 ppm</p></div>
      <div class="card"><p class="label">Sulfur Dioksida</p><p class="value">0.02 ppm</p></div>
      <div class="card"><p class="label">Partikulat Materi 2.5</p><p class="value">12 ug/m³</p></div>
      <div class="card"><p class="label">Partikulat Materi 10</p><p class="value">30 ug/m³</p></div>
    </div>
  </main>
</body>
</html>
"""

EXPECTED_SENSORS = {
    "suhu_udara": 33.6,
    "tekanan_udara": 1011.8,
    "curah_hujan": 0.0,
    "arah_angin": "Tenggara",
    "kelembaban_udara": 70.2,
    "kecepatan_angin": 3.1,
    "radiasi_matahari": 612.5,
    "karbon_dioksida": 412.0,
    "oksigen": 20.9,
    "gas_ozone": 0.03,
    "nitrogen_dioksida": 0.04,
    "sulfur_dioksida": 0.02,
    "partikulat_materi_2_5": 12.0,
    "partikulat_materi_10": 30.0,
}


@pytest.fixture()
def dashboard_html() -> str:
    return DASHBOARD_HTML


@pytest.fixture()
def dashboard_page() -> PageContent:
    """The dashboard as the fetch layer would hand it to the pipeline."""
    return parse_html(DASHBOARD_HTML)


@pytest.fixture()
def expected_sensors() -> dict:
    return dict(EXPECTED_SENSORS)


@pytest.fixture()
def empty_page() -> PageContent:
    """A page that rendered but carries no sensor data at all."""
    return PageContent(title="Loading", full_text="Loading...", visible_elements=())
