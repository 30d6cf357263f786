"""Exception types raised by the sensor feed."""

from __future__ import annotations


class SensorFeedError(Exception):
    """Base class for all sensor feed failures."""


class FetchError(SensorFeedError):
    """The dashboard page could not be retrieved or rendered.

    Wraps network errors, HTTP error statuses, browser launch failures and
    navigation timeouts so that callers only need to handle one type.
    """
