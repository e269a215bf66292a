"""
QuoteVault Backend - Root & Health Check Routes
================================================

What:  Welcome message at `/` and a health check at `/health`.
How:   `/health` runs `SELECT 1` against the database and reports uptime.
Who:   Humans hitting the base URL; Docker health checks and load balancers.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (still HTTP 200, see `status`)
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from quotevault import __version__
from quotevault.schemas.quote import HealthResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/",
    response_model=MessageResponse,
    summary="Welcome message",
)
async def root() -> MessageResponse:
    return MessageResponse(message="Welcome to QuoteVault API")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the backend service and its database.",
)
async def health_check() -> HealthResponse:
    """
    Check the health of the service and the database.

    Returns:
        HealthResponse with database status and uptime.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        from quotevault.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
