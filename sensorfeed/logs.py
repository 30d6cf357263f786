"""Logging setup shared by the API and the CLI."""

from __future__ import annotations

import logging

_NOISY_LOGGERS = ("httpx", "httpcore", "playwright", "asyncio")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once and quiet chatty third-party loggers.

    Calling it again only adjusts the root level; ``basicConfig`` is a no-op
    when handlers already exist.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level.upper())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
