"""
Health endpoints for the DAU service.

Liveness has no dependencies; readiness pings the bitmap store.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dautracker.core.logging import get_request_id
from dautracker.features.activity.service import ActivityTracker, get_tracker

logger = logging.getLogger("dautracker")

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/readyz")
def readyz(tracker: ActivityTracker = Depends(get_tracker)):
    """Readiness check: store connectivity."""
    result = tracker.store.ping()
    if not result.ok:
        logger.error(
            "readyz.store_unreachable",
            exc_info=result.error.__cause__ or result.error,
            extra={"request_id": get_request_id()},
        )
        return JSONResponse(status_code=503, content={"status": "error", "detail": "store unreachable"})
    return {"status": "ok"}
