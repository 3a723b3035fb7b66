"""
FastAPI application factory.

``create_app()`` wires middleware, exception handlers and the four resource
routers. The lifespan brings the database schema up to date before the
first request and closes the connection pool on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockbook import __version__
from stockbook.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockbook.api.middleware.error_handler import setup_exception_handlers
from stockbook.api.routes import (
    health_router,
    insights_router,
    materials_router,
    sales_router,
    stock_movements_router,
)
from stockbook.config import configure_logging, get_logger, get_settings
from stockbook.infrastructure.storage.sqlite import close_connection_pool, get_connection_pool
from stockbook.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    materials_router,
    stock_movements_router,
    sales_router,
    insights_router,
)


async def _log_catalog_state() -> None:
    pool = await get_connection_pool()
    async with pool.acquire() as conn:
        cursor = await conn.execute(
            """
            SELECT
                (SELECT COUNT(*) FROM materials),
                (SELECT COUNT(*) FROM stock_movements),
                (SELECT COUNT(*) FROM materials WHERE available_quantity <= reorder_level)
            """
        )
        materials, movements, low_stock = await cursor.fetchone()
    logger.info(
        "catalog_loaded",
        materials=materials,
        movements=movements,
        low_stock=low_stock,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging()
    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    results = await run_migrations()
    failed = [r for r in results if not r.success]
    if failed:
        logger.error("database_migration_failed", version=failed[0].version, error=failed[0].error)
        raise RuntimeError(f"Migration v{failed[0].version} failed: {failed[0].error}")
    logger.info("database_ready", applied=[r.version for r in results])

    await _log_catalog_state()

    yield

    await close_connection_pool()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the Stockbook API."""
    settings = get_settings()

    app = FastAPI(
        title="Stockbook Inventory API",
        description="Stock ledger, sales recording and inventory insights",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    # Root-level liveness for container health checks
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": __version__}

    @app.get("/")
    async def root() -> dict[str, object]:
        return {
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs" if settings.api.debug else None,
            "resources": [router.prefix for router in ROUTERS],
        }

    return app


app = create_app()
