"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

import stockbook.infrastructure.storage.sqlite.connection as conn_module
from stockbook.application.services import reset_services
from stockbook.config.settings import InsightSettings
from stockbook.core.entities.material import Material
from stockbook.core.entities.movement import MovementType, StockMovement
from stockbook.core.services import (
    InventoryInsightsService,
    MaterialRegistryService,
    SalesRecorderService,
    StockLedgerService,
)
from stockbook.infrastructure.storage.sqlite.connection import ConnectionPool, close_pool
from stockbook.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from stockbook.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore
from stockbook.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Path for a throwaway database file."""
    return tmp_path / "test.db"


@pytest.fixture
async def db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """Migrated database with the global connection pool pointed at it."""
    await close_pool()
    await initialize_database(db_path=temp_db_path, create_backup_before=False)

    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    conn_module._pool = pool
    reset_services()

    yield temp_db_path

    await close_pool()
    reset_services()


@pytest.fixture
def material_store(db: Path) -> SQLiteMaterialStore:
    return SQLiteMaterialStore()


@pytest.fixture
def ledger_store(db: Path) -> SQLiteLedgerStore:
    return SQLiteLedgerStore()


@pytest.fixture
def insight_settings() -> InsightSettings:
    """Default thresholds, independent of the environment."""
    return InsightSettings(
        dead_stock_days=30,
        high_value_capital=10000.0,
        large_quantity=50,
        fast_moving_days=30,
        fast_moving_min_sales=5,
        fast_moving_min_quantity=20,
        reorder_buffer_days=14,
        stable_days_sentinel=999,
        stockout_window_days=7,
        comprehensive_top_n=10,
        recent_movements=10,
    )


@pytest.fixture
def ledger(material_store, ledger_store) -> StockLedgerService:
    return StockLedgerService(material_store=material_store, ledger_store=ledger_store)


@pytest.fixture
def registry(material_store, ledger_store) -> MaterialRegistryService:
    return MaterialRegistryService(material_store=material_store, ledger_store=ledger_store)


@pytest.fixture
def sales(material_store, ledger_store, ledger) -> SalesRecorderService:
    return SalesRecorderService(
        material_store=material_store,
        ledger_store=ledger_store,
        stock_ledger=ledger,
    )


@pytest.fixture
def insights(material_store, ledger_store, insight_settings) -> InventoryInsightsService:
    return InventoryInsightsService(
        material_store=material_store,
        ledger_store=ledger_store,
        settings=insight_settings,
    )


@pytest.fixture
def create_material(
    registry: MaterialRegistryService,
    ledger: StockLedgerService,
) -> Callable[..., Awaitable[Material]]:
    """
    Factory for registered materials with an optional opening balance.

    The opening stock is booked as an INWARD purchase ``stocked_days_ago``
    days in the past so it does not count as recent activity.
    """

    async def _create(
        sku: str = "TILE-001",
        quantity: int = 0,
        reorder_level: int = 10,
        unit_price: float = 450.0,
        category: str = "Tiles",
        name: str | None = None,
        stocked_days_ago: int = 60,
    ) -> Material:
        material = await registry.create_material(
            sku=sku,
            name=name or f"Material {sku}",
            category=category,
            supplier="Test Supplier",
            unit_price=unit_price,
            reorder_level=reorder_level,
        )
        if quantity:
            _, material = await ledger.apply(
                StockMovement(
                    material_id=material.id,
                    movement_type=MovementType.INWARD,
                    quantity=quantity,
                    reason="Purchase",
                    created_at=datetime.now(UTC) - timedelta(days=stocked_days_ago),
                )
            )
        return material

    return _create
