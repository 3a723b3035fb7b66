"""
Integration tests for the inventory flow.

Real services over a migrated temporary SQLite database: register
materials, move stock, record sales, then read the insights back.
"""

from datetime import UTC, datetime, timedelta

import pytest

from stockbook.core.entities.insight import Urgency
from stockbook.core.exceptions import (
    DuplicateSkuError,
    InsufficientStockError,
    MaterialNotFoundError,
)
from stockbook.infrastructure.storage.sqlite.connection import get_connection


async def _ledger_sum(material_id: int) -> int:
    async with get_connection() as conn:
        cursor = await conn.execute(
            """
            SELECT COALESCE(SUM(CASE movement_type
                WHEN 'INWARD' THEN quantity ELSE -quantity END), 0)
            FROM stock_movements WHERE material_id = ?
            """,
            (material_id,),
        )
        return (await cursor.fetchone())[0]


class TestInventoryFlow:
    """End-to-end flows through the core services."""

    async def test_balance_equals_ledger_sum(self, registry, ledger, sales, create_material):
        material = await create_material("TILE-001", quantity=200)

        await ledger.record_movement(material.id, "OUTWARD", 50, reason="Sales")
        await ledger.record_damage(material.id, 5, reason="Damaged during handling")
        await sales.record_sale("tile-001", 30, customer_name="Retail walk-in")
        await ledger.record_movement(material.id, "INWARD", 35, reason="Purchase")

        detail = await registry.get_material(material.id)

        assert detail.material.available_quantity == 150
        assert detail.material.damaged_quantity == 5
        assert await _ledger_sum(material.id) == 150
        assert len(detail.recent_movements) == 5
        assert detail.recent_movements[0].reason == "Purchase"

    async def test_oversized_sale_leaves_no_trace(self, registry, ledger, sales, create_material):
        material = await create_material("PAINT-002", quantity=3)

        with pytest.raises(InsufficientStockError):
            await sales.record_sale("PAINT-002", 4)

        detail = await registry.get_material(material.id)
        assert detail.material.available_quantity == 3
        assert len(await ledger.list_movements_for_material(material.id)) == 1

    async def test_selling_entire_stock(self, sales, create_material):
        await create_material("HW-001", quantity=4, reorder_level=0)

        receipt = await sales.record_sale("HW-001", 4)

        assert receipt.stock_before == 4
        assert receipt.stock_after == 0
        assert receipt.is_low_stock is True

    async def test_sku_uniqueness_ignores_case(self, registry, create_material):
        await create_material("LAM-001")

        with pytest.raises(DuplicateSkuError):
            await registry.create_material("lam-001", "Copy", "Laminates", "S", 1)

    async def test_delete_removes_history(self, registry, ledger, create_material):
        material = await create_material("LIGHT-001", quantity=60)
        await ledger.record_movement(material.id, "OUTWARD", 15, reason="Sales")

        deleted = await registry.delete_material(material.id)

        assert deleted.sku == "LIGHT-001"
        assert await ledger.list_movements_for_material(material.id) == []
        with pytest.raises(MaterialNotFoundError):
            await registry.get_material(material.id)

    async def test_quantities_not_updatable(self, registry, create_material):
        material = await create_material("SANIT-001", quantity=30)

        updated = await registry.update_material(
            material.id, {"available_quantity": 0, "name": "Ceramic Water Closet"}
        )

        assert updated.available_quantity == 30
        assert updated.name == "Ceramic Water Closet"

    async def test_sales_reporting(self, sales, create_material):
        await create_material("A-1", quantity=100, unit_price=10)
        await create_material("B-1", quantity=100, unit_price=200)
        await sales.record_sale("A-1", 5, customer_name="Jo")
        await sales.record_sale("B-1", 1)
        await sales.record_sale("A-1", 2, sale_date=datetime.now(UTC) - timedelta(days=40))

        recent = await sales.list_sales(start=datetime.now(UTC) - timedelta(days=1))
        summary = await sales.get_sales_summary()
        history = await sales.list_sales_for_sku("a-1")

        assert [r.sku for r in recent] == ["B-1", "A-1"]
        assert summary.total_sales == 3
        assert summary.total_revenue == 270.0
        assert summary.top_products[0].sku == "B-1"
        assert [r.quantity_sold for r in history] == [5, 2]
        assert history[0].customer_name == "Jo"


class TestInsightsFlow:
    """Classification over ledger activity."""

    async def test_low_stock_item_with_recent_sale(self, insights, sales, create_material):
        await create_material("TILE-003", quantity=50, reorder_level=30, unit_price=520)
        await sales.record_sale("TILE-003", 45, sale_date=datetime.now(UTC) - timedelta(days=5))

        low_stock = await insights.get_low_stock_alerts()
        dead_stock = await insights.get_dead_stock_items()

        assert [a.material.sku for a in low_stock] == ["TILE-003"]
        assert low_stock[0].urgency == Urgency.CRITICAL
        assert low_stock[0].days_until_stockout == 0
        assert "TILE-003" not in {d.material.sku for d in dead_stock}

    async def test_dead_stock(self, insights, create_material):
        await create_material("HW-002", quantity=0, unit_price=8500)
        await create_material("SANIT-002", quantity=35, reorder_level=15, unit_price=3200)

        dead_stock = await insights.get_dead_stock_items()

        assert [d.material.sku for d in dead_stock] == ["SANIT-002"]
        assert dead_stock[0].tied_up_capital == 112000.0
        assert dead_stock[0].recommendation.startswith("High-value dead stock")

    async def test_dead_stock_window(self, insights, sales, create_material):
        now = datetime.now(UTC)
        await create_material("LAM-001", quantity=20, unit_price=100)
        await create_material("LAM-002", quantity=20, unit_price=100)
        await create_material("LAM-003", quantity=20, unit_price=100)
        await sales.record_sale("LAM-001", 5, sale_date=now - timedelta(days=31))
        await sales.record_sale("LAM-002", 5, sale_date=now - timedelta(days=10))
        await sales.record_sale("LAM-003", 20, sale_date=now - timedelta(days=40))

        dead_stock = await insights.get_dead_stock_items()

        assert [d.material.sku for d in dead_stock] == ["LAM-001"]
        assert dead_stock[0].tied_up_capital == 1500.0

    async def test_fast_moving(self, insights, sales, create_material):
        await create_material("PAINT-001", quantity=40, reorder_level=5)
        for quantity in (5, 5, 4, 4, 4, 3):
            await sales.record_sale("PAINT-001", quantity)

        fast = await insights.get_fast_moving_items()

        assert [f.material.sku for f in fast] == ["PAINT-001"]
        assert fast[0].sales_metrics.total_quantity_sold == 25
        assert fast[0].sales_metrics.sales_count == 6
        assert fast[0].stock_status.current_stock == 15

    async def test_damage_is_not_a_sale(self, insights, ledger, create_material):
        material = await create_material("LIGHT-002", quantity=50)
        for _ in range(6):
            await ledger.record_damage(material.id, 4)

        assert await insights.get_fast_moving_items() == []
        summary = await insights.get_damaged_inventory_summary()
        assert summary.total_quantity == 24

    async def test_insights_are_idempotent(self, insights, sales, create_material):
        await create_material("TILE-001", quantity=20, reorder_level=25)
        await create_material("LAM-003", quantity=40)
        for _ in range(5):
            await sales.record_sale("TILE-001", 1)

        first = await insights.get_comprehensive_insights()
        second = await insights.get_comprehensive_insights()

        exclude = {"timestamp": True}
        assert first.model_dump(exclude=exclude) == second.model_dump(exclude=exclude)
        assert first.summary.total_issues >= 1

    async def test_dashboard_and_categories(self, insights, create_material):
        await create_material("TILE-001", quantity=10, unit_price=450, category="Tiles")
        await create_material("PAINT-001", quantity=4, unit_price=2400, category="Paints")

        metrics = await insights.get_dashboard_metrics()
        breakdown = await insights.get_category_breakdown()

        assert metrics.total_materials == 2
        assert metrics.total_quantity == 14
        assert metrics.total_value == 14100.0
        assert [c.category for c in breakdown] == ["Paints", "Tiles"]

    async def test_top_moving_skus(self, insights, ledger, create_material):
        busy = await create_material("A-1", quantity=10)
        await create_material("B-1", quantity=10)
        for _ in range(3):
            await ledger.record_movement(busy.id, "OUTWARD", 1)

        ranked = await insights.get_top_moving_skus(limit=1)

        assert [(r.material.sku, r.movement_count) for r in ranked] == [("A-1", 4)]
