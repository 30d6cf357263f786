"""Sensor extraction pipeline — candidates, patterns, fallback, normalization, output."""

from sensorfeed.sensors.cache import SnapshotCache
from sensorfeed.sensors.catalog import CATEGORIES, SENSOR_KEYS
from sensorfeed.sensors.pipeline import build_snapshot
from sensorfeed.sensors.service import SensorService

__all__ = ["SENSOR_KEYS", "CATEGORIES", "build_snapshot", "SnapshotCache", "SensorService"]
