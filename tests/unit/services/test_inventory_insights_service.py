"""Tests for InventoryInsightsService."""

from datetime import UTC, datetime, timedelta

import pytest

from service_helpers import make_material
from stockbook.core.entities.insight import Urgency
from stockbook.core.entities.movement import MovementAggregate, MovementType
from stockbook.core.exceptions import ValidationError
from stockbook.core.services.inventory_insights import (
    InventoryInsightsService,
    fast_moving_urgency,
    low_stock_urgency,
)

HIGH_VALUE = "High-value dead stock: consider discount sale or return to supplier"
LARGE_QUANTITY = "Large quantity sitting idle: consider promotional offer"
MONITOR = "Monitor for another 30 days or consider bundling with fast-moving items"


def _agg(material_id: int, total: int, count: int) -> MovementAggregate:
    return MovementAggregate(
        material_id=material_id,
        total_quantity=total,
        movement_count=count,
        last_movement_at=datetime(2025, 3, 1, tzinfo=UTC),
    )


def _by_reason(outward: list[MovementAggregate], sales: list[MovementAggregate]):
    """side_effect routing aggregate queries by their reason filter."""

    async def _aggregate(since=None, movement_type=None, reason=None):
        if reason == "Sales":
            return list(sales)
        return list(outward)

    return _aggregate


class TestUrgencyRules:
    @pytest.mark.parametrize(
        ("quantity", "reorder", "expected"),
        [
            (0, 10, Urgency.CRITICAL),
            (0, 0, Urgency.CRITICAL),
            (5, 10, Urgency.CRITICAL),
            (6, 10, Urgency.HIGH),
            (7, 10, Urgency.HIGH),
            (8, 10, Urgency.MEDIUM),
            (10, 10, Urgency.MEDIUM),
        ],
    )
    def test_low_stock(self, quantity, reorder, expected):
        assert low_stock_urgency(quantity, reorder) == expected

    @pytest.mark.parametrize(
        ("days", "expected"),
        [(0, Urgency.CRITICAL), (7, Urgency.CRITICAL), (8, Urgency.HIGH), (14, Urgency.HIGH),
         (15, Urgency.MEDIUM), (999, Urgency.MEDIUM)],
    )
    def test_fast_moving(self, days, expected):
        assert fast_moving_urgency(days) == expected


class TestLowStock:
    async def test_alerts_with_stockout_estimate(
        self, material_store, ledger_store, insight_settings
    ):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=5, reorder_level=30),
            make_material(2, available_quantity=20, reorder_level=25),
            make_material(3, available_quantity=100, reorder_level=10),
        ]
        ledger_store.aggregate_movements.return_value = [_agg(1, 14, 3)]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        alerts = await svc.get_low_stock_alerts()

        assert [a.material.id for a in alerts] == [1, 2]
        assert alerts[0].urgency == Urgency.CRITICAL
        assert alerts[0].days_until_stockout == 2
        assert alerts[1].urgency == Urgency.MEDIUM
        assert alerts[1].days_until_stockout is None
        assert alerts[0].alert == "Low stock: reorder recommended"

        kwargs = ledger_store.aggregate_movements.call_args.kwargs
        assert kwargs["movement_type"] == MovementType.OUTWARD
        assert datetime.now(UTC) - kwargs["since"] == pytest.approx(
            timedelta(days=7), abs=timedelta(seconds=5)
        )

    async def test_critical_first_then_emptiest(
        self, material_store, ledger_store, insight_settings
    ):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=3, reorder_level=10),
            make_material(2, available_quantity=1, reorder_level=1),
            make_material(3, available_quantity=0, reorder_level=10),
        ]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        alerts = await svc.get_low_stock_alerts()

        assert [a.material.id for a in alerts] == [3, 1, 2]
        assert [a.urgency for a in alerts] == [Urgency.CRITICAL, Urgency.CRITICAL, Urgency.MEDIUM]

    async def test_no_low_stock_skips_ledger(
        self, material_store, ledger_store, insight_settings
    ):
        material_store.list_materials.return_value = [make_material(1, available_quantity=50)]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        assert await svc.get_low_stock_alerts() == []
        ledger_store.aggregate_movements.assert_not_awaited()


class TestDeadStock:
    async def test_classification_and_recommendations(
        self, material_store, ledger_store, insight_settings
    ):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=10, unit_price=2000),
            make_material(2, available_quantity=60, unit_price=10),
            make_material(3, available_quantity=3, unit_price=3.333),
            make_material(4, available_quantity=0, unit_price=500),
            make_material(5, available_quantity=10, unit_price=9999),
        ]
        ledger_store.aggregate_movements.return_value = [_agg(5, 1, 1)]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        items = await svc.get_dead_stock_items()

        assert [i.material.id for i in items] == [1, 2, 3]
        assert items[0].recommendation == HIGH_VALUE
        assert items[0].tied_up_capital == 20000.0
        assert items[1].recommendation == LARGE_QUANTITY
        assert items[2].recommendation == MONITOR
        assert items[2].tied_up_capital == 10.0
        assert all(i.days_inactive == 30 for i in items)
        assert items[0].alert == "Dead stock: no sales in 30 days"

        kwargs = ledger_store.aggregate_movements.call_args.kwargs
        assert kwargs["reason"] == "Sales"
        assert kwargs["movement_type"] == MovementType.OUTWARD
        assert datetime.now(UTC) - kwargs["since"] == pytest.approx(
            timedelta(days=30), abs=timedelta(seconds=5)
        )

    async def test_thresholds_are_exclusive(
        self, material_store, ledger_store, insight_settings
    ):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=10, unit_price=1000),
            make_material(2, available_quantity=50, unit_price=1),
        ]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        items = await svc.get_dead_stock_items()

        assert {i.material.id: i.recommendation for i in items} == {1: MONITOR, 2: MONITOR}


class TestFastMoving:
    async def test_metrics(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=3),
            make_material(2, available_quantity=100),
            make_material(3, available_quantity=40),
        ]
        ledger_store.aggregate_movements.return_value = [
            _agg(1, 12, 6),
            _agg(2, 30, 2),
            _agg(3, 5, 2),
        ]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        items = await svc.get_fast_moving_items()

        assert [i.material.id for i in items] == [2, 1]

        fastest = items[0]
        assert fastest.sales_metrics.sales_velocity == 1.0
        assert fastest.sales_metrics.sales_frequency == 0.07
        assert fastest.sales_metrics.period_days == 30
        assert fastest.stock_status.days_of_stock_remaining == 100
        assert fastest.stock_status.recommended_reorder_quantity == 14
        assert fastest.urgency == Urgency.MEDIUM

        urgent = items[1]
        assert urgent.sales_metrics.sales_count == 6
        assert urgent.sales_metrics.sales_velocity == 0.4
        assert urgent.sales_metrics.sales_frequency == 0.2
        assert urgent.stock_status.days_of_stock_remaining == 7
        assert urgent.stock_status.recommended_reorder_quantity == 6
        assert urgent.urgency == Urgency.CRITICAL

    async def test_custom_window(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [make_material(1, available_quantity=20)]
        ledger_store.aggregate_movements.return_value = [_agg(1, 20, 5)]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        items = await svc.get_fast_moving_items(days="10")

        assert items[0].sales_metrics.sales_velocity == 2.0
        assert items[0].stock_status.days_of_stock_remaining == 10
        assert items[0].urgency == Urgency.HIGH
        since = ledger_store.aggregate_movements.call_args.kwargs["since"]
        assert datetime.now(UTC) - since == pytest.approx(
            timedelta(days=10), abs=timedelta(seconds=5)
        )

    async def test_unknown_material_skipped(self, material_store, ledger_store, insight_settings):
        ledger_store.aggregate_movements.return_value = [_agg(9, 50, 9)]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        assert await svc.get_fast_moving_items() == []

    @pytest.mark.parametrize("days", [0, -3, "abc", 2.5])
    async def test_invalid_days(self, material_store, ledger_store, insight_settings, days):
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)
        with pytest.raises(ValidationError) as exc_info:
            await svc.get_fast_moving_items(days=days)
        assert exc_info.value.field == "Days"

    async def test_window_longer_than_calendar(
        self, material_store, ledger_store, insight_settings
    ):
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        with pytest.raises(ValidationError, match="Days cannot exceed 36500"):
            await svc.get_fast_moving_items(days=1_000_000)
        ledger_store.aggregate_movements.assert_not_awaited()


class TestAggregates:
    async def test_dashboard(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=5, damaged_quantity=2, unit_price=10.002),
            make_material(2, available_quantity=50, unit_price=2),
        ]
        ledger_store.aggregate_movements.return_value = [_agg(2, 1, 1)]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        metrics = await svc.get_dashboard_metrics()

        assert metrics.total_materials == 2
        assert metrics.total_quantity == 55
        assert metrics.total_damaged == 2
        assert metrics.total_value == 150.01
        assert metrics.low_stock_count == 1
        assert metrics.dead_stock_count == 1

    async def test_category_breakdown(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [
            make_material(1, category="Tiles", available_quantity=2, unit_price=1.111),
            make_material(2, category="Paints", available_quantity=3, unit_price=10),
            make_material(3, category="Tiles", available_quantity=1, unit_price=5),
        ]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        breakdown = await svc.get_category_breakdown()

        assert [c.category for c in breakdown] == ["Paints", "Tiles"]
        tiles = breakdown[1]
        assert tiles.count == 2
        assert tiles.total_quantity == 3
        assert tiles.total_value == 7.22
        assert [m.id for m in tiles.items] == [1, 3]

    async def test_damaged_summary(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [
            make_material(1, damaged_quantity=1, unit_price=100),
            make_material(2, damaged_quantity=0),
            make_material(3, damaged_quantity=4, unit_price=10),
        ]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        summary = await svc.get_damaged_inventory_summary()

        assert [m.id for m in summary.items] == [3, 1]
        assert summary.total_quantity == 5
        assert summary.total_value == 140.0

    async def test_top_moving_skus(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [make_material(i) for i in (1, 2, 3)]
        ledger_store.aggregate_movements.return_value = [
            _agg(3, 10, 4),
            _agg(2, 10, 4),
            _agg(9, 10, 8),
            _agg(1, 10, 1),
        ]
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        ranked = await svc.get_top_moving_skus(limit="2")

        assert [(r.material.id, r.movement_count) for r in ranked] == [(2, 4), (3, 4)]
        ledger_store.aggregate_movements.assert_awaited_once_with()

    async def test_top_moving_skus_invalid_limit(
        self, material_store, ledger_store, insight_settings
    ):
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)
        with pytest.raises(ValidationError, match="Limit"):
            await svc.get_top_moving_skus(limit=0)


class TestComprehensive:
    async def test_summary_and_slicing(self, material_store, ledger_store, insight_settings):
        material_store.list_materials.return_value = [
            make_material(1, available_quantity=3, reorder_level=10, unit_price=10),
            make_material(2, available_quantity=40, reorder_level=10, unit_price=10),
            make_material(3, available_quantity=8, reorder_level=10, unit_price=10),
        ]
        ledger_store.aggregate_movements.side_effect = _by_reason(
            outward=[_agg(1, 12, 6)],
            sales=[_agg(1, 12, 6)],
        )
        settings = insight_settings.model_copy(update={"comprehensive_top_n": 1})
        svc = InventoryInsightsService(material_store, ledger_store, settings)

        result = await svc.get_comprehensive_insights()

        assert result.summary.fast_moving_count == 1
        assert result.summary.dead_stock_count == 2
        assert result.summary.low_stock_count == 2
        assert result.summary.total_issues == 4
        assert [i.material.id for i in result.fast_moving_items] == [1]
        assert [i.material.id for i in result.dead_stock_items] == [2]
        assert [i.material.id for i in result.low_stock_items] == [1]
        assert result.low_stock_items[0].days_until_stockout == 1

    async def test_empty_inventory(self, material_store, ledger_store, insight_settings):
        svc = InventoryInsightsService(material_store, ledger_store, insight_settings)

        result = await svc.get_comprehensive_insights()

        assert result.summary.total_issues == 0
        assert result.fast_moving_items == []
        assert result.dead_stock_items == []
        assert result.low_stock_items == []
