"""Health check endpoints for load balancers and monitoring."""

import logging
import os

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.db.session import check_connection

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health():
    """Simple liveness check. Includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(request: Request):
    """Readiness: one connectivity attempt against the app's engine."""
    try:
        await check_connection(request.app.state.engine, retries=1)
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": "unavailable"},
        )
    return {"status": "ok", "database": "connected"}
