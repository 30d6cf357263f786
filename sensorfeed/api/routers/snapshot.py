"""Snapshot endpoint.

Routes
------
GET /api/data    → SensorService.fetch_sensor_snapshot
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter()

CACHE_CONTROL = "s-maxage=60, stale-while-revalidate"


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class SnapshotResponse(BaseModel):
    timestamp: str
    status: Literal["success", "error"]
    source: Optional[str] = None
    sensors: Optional[dict[str, Any]] = None
    raw_sensors: Optional[dict[str, Optional[str]]] = None
    provenance: Optional[dict[str, str]] = None
    note: Optional[str] = None
    cached: Optional[bool] = None
    error: Optional[str] = None


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.get("/data", response_model=SnapshotResponse, response_model_exclude_unset=True)
def get_snapshot(request: Request) -> Any:
    """Return the latest sensor snapshot.

    Served from the in-memory cache while fresh.  Responds 500 with an error
    envelope only when the dashboard cannot be fetched and nothing is cached.
    """
    service = request.app.state.service
    snapshot = service.fetch_sensor_snapshot()

    status_code = 500 if snapshot.get("status") == "error" else 200
    body = SnapshotResponse(**snapshot).model_dump(exclude_unset=True)
    return JSONResponse(
        content=body,
        status_code=status_code,
        headers={"Cache-Control": CACHE_CONTROL},
    )
