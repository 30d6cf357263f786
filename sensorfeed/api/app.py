"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging and creates a single
:class:`~sensorfeed.sensors.service.SensorService` (shared across all
requests via ``request.app.state.service``).  The service's in-memory cache
lives exactly as long as the process.

Routers
-------
    /api/data  — current sensor snapshot for the downstream client
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sensorfeed.api.routers import snapshot as snapshot_router
from sensorfeed.config import settings
from sensorfeed.logs import configure_logging
from sensorfeed.sensors.service import SensorService


def create_app(service: Optional[SensorService] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        service: Pre-built service to serve from (tests inject one with a
            fake fetcher).  A default service is created on startup otherwise.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        app.state.service = service or SensorService()
        yield

    app = FastAPI(
        title="Sensor Feed API",
        description=(
            "Scrapes the environmental monitoring dashboard and serves its "
            "14 sensor readings as compact JSON for microcontroller clients."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(snapshot_router.router, prefix="/api", tags=["sensors"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn sensorfeed.api.app:app
app = create_app()
