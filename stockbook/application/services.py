"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services.
API dependencies and the management CLI import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from stockbook.config import get_settings
from stockbook.core.services import (
    InventoryInsightsService,
    MaterialRegistryService,
    SalesRecorderService,
    StockLedgerService,
)

if TYPE_CHECKING:
    from stockbook.config.settings import InsightSettings
    from stockbook.core.interfaces import ILedgerStore, IMaterialStore


# Singleton service instances
_stock_ledger_service: StockLedgerService | None = None
_material_registry_service: MaterialRegistryService | None = None
_sales_recorder_service: SalesRecorderService | None = None
_inventory_insights_service: InventoryInsightsService | None = None


async def _default_stores(
    material_store: "IMaterialStore | None",
    ledger_store: "ILedgerStore | None",
) -> tuple["IMaterialStore", "ILedgerStore"]:
    # Lazy import infrastructure to avoid circular imports
    from stockbook.infrastructure.storage.sqlite import (
        get_ledger_store,
        get_material_store,
    )

    return (
        material_store or await get_material_store(),
        ledger_store or await get_ledger_store(),
    )


async def get_stock_ledger_service(
    material_store: "IMaterialStore | None" = None,
    ledger_store: "ILedgerStore | None" = None,
) -> StockLedgerService:
    """
    Get or create StockLedgerService instance.

    Creates SQLite stores if not provided. The singleton is only cached
    when built from the default stores.

    Args:
        material_store: Optional material store override
        ledger_store: Optional ledger store override

    Returns:
        Configured StockLedgerService
    """
    global _stock_ledger_service

    overridden = material_store is not None or ledger_store is not None
    if _stock_ledger_service is not None and not overridden:
        return _stock_ledger_service

    materials, ledger = await _default_stores(material_store, ledger_store)
    service = StockLedgerService(material_store=materials, ledger_store=ledger)

    if not overridden:
        _stock_ledger_service = service
    return service


async def get_material_registry_service(
    material_store: "IMaterialStore | None" = None,
    ledger_store: "ILedgerStore | None" = None,
) -> MaterialRegistryService:
    """Get or create MaterialRegistryService instance."""
    global _material_registry_service

    overridden = material_store is not None or ledger_store is not None
    if _material_registry_service is not None and not overridden:
        return _material_registry_service

    settings = get_settings()
    materials, ledger = await _default_stores(material_store, ledger_store)
    service = MaterialRegistryService(
        material_store=materials,
        ledger_store=ledger,
        default_reorder_level=settings.default_reorder_level,
        recent_movements=settings.insights.recent_movements,
    )

    if not overridden:
        _material_registry_service = service
    return service


async def get_sales_recorder_service(
    material_store: "IMaterialStore | None" = None,
    ledger_store: "ILedgerStore | None" = None,
) -> SalesRecorderService:
    """Get or create SalesRecorderService instance."""
    global _sales_recorder_service

    overridden = material_store is not None or ledger_store is not None
    if _sales_recorder_service is not None and not overridden:
        return _sales_recorder_service

    materials, ledger = await _default_stores(material_store, ledger_store)
    service = SalesRecorderService(material_store=materials, ledger_store=ledger)

    if not overridden:
        _sales_recorder_service = service
    return service


async def get_inventory_insights_service(
    material_store: "IMaterialStore | None" = None,
    ledger_store: "ILedgerStore | None" = None,
    settings: "InsightSettings | None" = None,
) -> InventoryInsightsService:
    """
    Get or create InventoryInsightsService instance.

    Args:
        material_store: Optional material store override
        ledger_store: Optional ledger store override
        settings: Optional thresholds override (default from settings)

    Returns:
        Configured InventoryInsightsService
    """
    global _inventory_insights_service

    overridden = any(x is not None for x in (material_store, ledger_store, settings))
    if _inventory_insights_service is not None and not overridden:
        return _inventory_insights_service

    materials, ledger = await _default_stores(material_store, ledger_store)
    service = InventoryInsightsService(
        material_store=materials,
        ledger_store=ledger,
        settings=settings or get_settings().insights,
    )

    if not overridden:
        _inventory_insights_service = service
    return service


def reset_services() -> None:
    """Drop cached service instances (for testing)."""
    global _stock_ledger_service, _material_registry_service
    global _sales_recorder_service, _inventory_insights_service
    _stock_ledger_service = None
    _material_registry_service = None
    _sales_recorder_service = None
    _inventory_insights_service = None
