"""
Tourlist Backend - Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the store and the media service and returns an aggregate status.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   All dependencies operational (HTTP 200)
    - degraded:  Media service down or circuit open (HTTP 200; listings still work)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request, Response

from app import __version__
from app.database import Database
from app.schemas.common import HealthResponse
from app.services.media_base import MediaService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Probe the database (SELECT 1) and the media service (API ping).

    The media ping is skipped while the circuit breaker is open.
    """
    database: Database = request.app.state.database
    media: MediaService = request.app.state.media_service

    db_status = "connected"
    media_status = "available"
    overall = "healthy"

    if not await database.ping():
        db_status = "disconnected"
        overall = "unhealthy"

    if media.circuit_open:
        media_status = "circuit_open"
    elif not await media.health_check():
        media_status = "unavailable"

    if media_status != "available" and overall != "unhealthy":
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        media=media_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
