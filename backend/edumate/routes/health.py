"""
EduMate Backend — Health Check Route
======================================

What:  GET /health for Docker health checks and load balancer probes.
How:   Runs SELECT 1 against the database and reports whether the Gemini
       credential is configured. It never calls Gemini: that would spend quota.

Status levels:
    healthy    database reachable and Gemini configured     (HTTP 200)
    degraded   database reachable, Gemini not configured    (HTTP 200)
    unhealthy  database unreachable                         (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from sqlalchemy import text

from edumate import __version__
from edumate.config import settings
from edumate.database import engine
from edumate.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    client = getattr(request.app.state, "generation_client", None)
    configured = client.is_configured if client is not None else settings.gemini_configured
    gemini_status = "configured" if configured else "not_configured"
    if not configured and overall == "healthy":
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        gemini=gemini_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
