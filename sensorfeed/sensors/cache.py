"""Read-through snapshot cache with stale-on-error and single-flight loading.

The cache owns one :class:`CacheEntry` slot.  ``get`` serves the entry while
it is fresh; once it is stale (or absent) the loader runs again.  Only one
load is ever in flight: callers arriving meanwhile wait on the same
:class:`~concurrent.futures.Future` and receive the same outcome.

If a load fails while a stale entry exists, the stale data is returned
annotated with ``cached: True`` instead of the error.  With no entry the
error propagates to the caller.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

STALE_NOTE = "Data from cache (recent error)"

Snapshot = Dict[str, Any]


@dataclass
class CacheEntry:
    data: Snapshot
    captured_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.captured_at < self.ttl


class SnapshotCache:
    """Single-slot read-through cache around a snapshot *loader*.

    Args:
        loader: Zero-argument callable producing a fresh snapshot; any
            exception it raises counts as a failed run.
        ttl: Seconds an entry stays fresh.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        loader: Callable[[], Snapshot],
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: Optional[CacheEntry] = None
        self._inflight: Optional[Future] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    @property
    def is_warm(self) -> bool:
        return self._entry is not None

    def clear(self) -> None:
        """Drop the cached entry, returning the cache to the cold state."""
        with self._lock:
            self._entry = None

    def get(self, now: Optional[float] = None) -> Snapshot:
        """Return a snapshot, loading a new one when the entry is missing or stale.

        Raises:
            Exception: Whatever the loader raised, when no entry (not even a
                stale one) is available.
        """
        with self._lock:
            current = self._clock() if now is None else now
            entry = self._entry
            if entry is not None and entry.is_fresh(current):
                return entry.data

            future = self._inflight
            leader = future is None
            if leader:
                future = Future()
                self._inflight = future

        if not leader:
            logger.debug("Waiting on in-flight snapshot load")
            return future.result()

        try:
            outcome = self._load(current)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(outcome)
            return outcome
        finally:
            with self._lock:
                self._inflight = None

    def _load(self, now: float) -> Snapshot:
        """Run the loader once and settle the entry; called by the leader only."""
        try:
            data = self._loader()
        except Exception as exc:
            with self._lock:
                stale = self._entry
            if stale is None:
                logger.error("Snapshot load failed with a cold cache: %s", exc)
                raise
            logger.warning("Snapshot load failed, serving stale entry: %s", exc)
            return {**stale.data, "cached": True, "note": STALE_NOTE}

        with self._lock:
            self._entry = CacheEntry(data=data, captured_at=now, ttl=self._ttl)
        return data
