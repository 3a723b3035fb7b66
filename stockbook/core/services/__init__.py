"""
Core business logic services.

Layer-pure services that depend only on:
- stockbook/core/entities/*
- stockbook/core/interfaces/*
- stockbook/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stockbook.core.services.inventory_insights import InventoryInsightsService
from stockbook.core.services.material_registry import MaterialRegistryService
from stockbook.core.services.sales_recorder import SalesRecorderService
from stockbook.core.services.stock_ledger import StockLedgerService

__all__ = [
    # Ledger
    "StockLedgerService",
    # Catalog
    "MaterialRegistryService",
    # Sales
    "SalesRecorderService",
    # Insights
    "InventoryInsightsService",
]
