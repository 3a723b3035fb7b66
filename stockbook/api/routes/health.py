"""Liveness and database readiness endpoints."""

import time

import aiosqlite
from fastapi import APIRouter

from stockbook import __version__
from stockbook.application.dto.responses import HealthResponse, ProviderHealthResponse
from stockbook.config import get_logger
from stockbook.infrastructure.storage.sqlite import get_connection_pool
from stockbook.infrastructure.storage.sqlite.migrations.migrator import get_current_version

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _uptime() -> float:
    return round(time.monotonic() - _started_at, 3)


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Process liveness; does not touch the database."""
    return HealthResponse(status="healthy", version=__version__, uptime_seconds=_uptime())


@router.get("/db", response_model=HealthResponse)
async def db_health() -> HealthResponse:
    """
    Database readiness.

    Pings the pool and reports latency, the applied schema version and how
    many pooled connections are busy. A failure yields status "unhealthy"
    rather than an error response.
    """
    try:
        pool = await get_connection_pool()
        latency = await pool.ping()
        async with pool.acquire() as conn:
            schema_version = await get_current_version(conn)
        database = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round(latency, 2),
            schema_version=schema_version,
            pool=pool.stats(),
        )
    except (aiosqlite.Error, OSError) as e:
        logger.error("db_health_check_failed", error=str(e))
        database = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if database.available else "unhealthy",
        version=__version__,
        uptime_seconds=_uptime(),
        database=database,
    )
