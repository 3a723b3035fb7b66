"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests replace these through
``app.dependency_overrides``.
"""

from functools import lru_cache

from stockbook.application.services import (
    get_inventory_insights_service,
    get_material_registry_service,
    get_sales_recorder_service,
    get_stock_ledger_service,
)
from stockbook.config import Settings, get_settings
from stockbook.core.services import (
    InventoryInsightsService,
    MaterialRegistryService,
    SalesRecorderService,
    StockLedgerService,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


async def get_registry() -> MaterialRegistryService:
    """Get material registry service."""
    return await get_material_registry_service()


async def get_ledger() -> StockLedgerService:
    """Get stock ledger service."""
    return await get_stock_ledger_service()


async def get_sales() -> SalesRecorderService:
    """Get sales recorder service."""
    return await get_sales_recorder_service()


async def get_insights() -> InventoryInsightsService:
    """Get inventory insights service."""
    return await get_inventory_insights_service()
