"""
DualStore — Health Check Routes
=================================

What:  Liveness and readiness endpoints.
Who:   Called by Docker health checks, load balancers, and monitoring systems.

    GET /api/healthchecker  Liveness: the process is up and routing requests.
                            Never touches a store.
    GET /health             Readiness: SELECT 1 against PostgreSQL and a ping
                            against MongoDB. Always HTTP 200; the body says which
                            dependency is down.

    Status levels:
    - healthy:   both stores reachable
    - degraded:  one store down (the other half of the API still works)
    - unhealthy: both stores down
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from dualstore import __version__
from dualstore.schemas.common import GenericResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

HEALTH_MESSAGE = "CRUD API over PostgreSQL and MongoDB"

_start_time = time.time()


@router.get(
    "/api/healthchecker",
    response_model=GenericResponse,
    summary="Liveness check",
)
async def health_checker() -> GenericResponse:
    logger.info(HEALTH_MESSAGE)
    return GenericResponse(status="success", message=HEALTH_MESSAGE)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Readiness check for both stores",
)
async def health_check() -> HealthResponse:
    """
    Probe PostgreSQL and MongoDB with the cheapest round-trip each supports.
    """
    postgres_status = "connected"
    mongodb_status = "connected"

    try:
        from dualstore.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        postgres_status = "disconnected"
        logger.warning("Health check: PostgreSQL unreachable: %s", str(e))

    try:
        from dualstore.mongo import ping
        await ping()
    except Exception as e:
        mongodb_status = "disconnected"
        logger.warning("Health check: MongoDB unreachable: %s", str(e))

    down = [s for s in (postgres_status, mongodb_status) if s != "connected"]
    if not down:
        overall = "healthy"
    elif len(down) == 1:
        overall = "degraded"
    else:
        overall = "unhealthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        postgres=postgres_status,
        mongodb=mongodb_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
