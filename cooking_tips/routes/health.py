"""
Cooking Tips Backend — Health Check Route
===========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   With the SQL store active, runs `SELECT 1` against the database.
       The memory store has no external dependency to probe.

Status levels:
    - healthy:   store reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from cooking_tips import __version__
from cooking_tips.config import settings
from cooking_tips.database import engine
from cooking_tips.schemas.tip import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "unused"
    overall = "healthy"

    if settings.tip_store_backend == "sql":
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
        except Exception as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: database unreachable: %s", str(e))

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        store=settings.tip_store_backend,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
