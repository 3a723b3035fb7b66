"""
Inventory Insights Service.

Evaluates stock health on demand from current balances and the stock
ledger. Read-only: nothing here writes to either store, and repeated calls
over an unchanged ledger return the same classifications.

Rules:
- Low stock: available quantity at or below the reorder level.
- Dead stock: stock on hand but no sales inside the dead-stock window.
- Fast-moving: enough sales (by count or by volume) inside the window.
"""

from __future__ import annotations

import asyncio
import math
from datetime import UTC, datetime, timedelta
from typing import Any

from stockbook.config import get_logger, get_settings
from stockbook.config.settings import InsightSettings
from stockbook.core.entities.insight import (
    CategoryBreakdown,
    CategoryMember,
    ComprehensiveInsights,
    DamagedInventorySummary,
    DashboardMetrics,
    DeadStockItem,
    FastMovingItem,
    InsightsSummary,
    LowStockAlert,
    SalesMetrics,
    StockStatus,
    TopMovingSku,
    Urgency,
)
from stockbook.core.entities.material import Material
from stockbook.core.entities.movement import MovementReason, MovementType
from stockbook.core.exceptions import ValidationError
from stockbook.core.interfaces.ledger_store import ILedgerStore
from stockbook.core.interfaces.material_store import IMaterialStore
from stockbook.core.validators import validate_positive_integer

logger = get_logger(__name__)

# Fast-moving urgency by days of stock remaining
CRITICAL_DAYS_REMAINING = 7
HIGH_DAYS_REMAINING = 14


def _round2(value: float) -> float:
    return round(value, 2)


def low_stock_urgency(available_quantity: int, reorder_level: int) -> Urgency:
    """Urgency of a low-stock item, first matching rule wins."""
    if available_quantity == 0:
        return Urgency.CRITICAL
    if available_quantity <= reorder_level * 0.5:
        return Urgency.CRITICAL
    if available_quantity <= reorder_level * 0.75:
        return Urgency.HIGH
    return Urgency.MEDIUM


def fast_moving_urgency(days_remaining: int) -> Urgency:
    if days_remaining <= CRITICAL_DAYS_REMAINING:
        return Urgency.CRITICAL
    if days_remaining <= HIGH_DAYS_REMAINING:
        return Urgency.HIGH
    return Urgency.MEDIUM


class InventoryInsightsService:
    """
    Layer-pure service that classifies materials from ledger activity.

    Thresholds come from InsightSettings.
    """

    def __init__(
        self,
        material_store: IMaterialStore,
        ledger_store: ILedgerStore,
        settings: InsightSettings | None = None,
    ) -> None:
        self._material_store = material_store
        self._ledger_store = ledger_store
        self._settings = settings or get_settings().insights

    # ------------------------------------------------------------------
    # Low stock
    # ------------------------------------------------------------------

    async def get_low_stock_alerts(self) -> list[LowStockAlert]:
        """Materials at or below reorder level, critical first then emptiest."""
        materials = await self._material_store.list_materials()
        return await self._low_stock(materials, datetime.now(UTC))

    async def _low_stock(
        self, materials: list[Material], now: datetime
    ) -> list[LowStockAlert]:
        low = [m for m in materials if m.is_low_stock]
        if not low:
            return []

        window = self._settings.stockout_window_days
        outward = await self._ledger_store.aggregate_movements(
            since=now - timedelta(days=window),
            movement_type=MovementType.OUTWARD,
        )
        outward_by_material = {a.material_id: a.total_quantity for a in outward}

        alerts = []
        for material in low:
            days_until_stockout = None
            total_out = outward_by_material.get(material.id, 0)
            if total_out > 0:
                daily_rate = total_out / window
                days_until_stockout = math.floor(material.available_quantity / daily_rate)

            alerts.append(
                LowStockAlert(
                    material=material,
                    urgency=low_stock_urgency(
                        material.available_quantity, material.reorder_level
                    ),
                    days_until_stockout=days_until_stockout,
                )
            )

        alerts.sort(
            key=lambda a: (
                a.urgency != Urgency.CRITICAL,
                a.material.available_quantity,
            )
        )
        return alerts

    # ------------------------------------------------------------------
    # Dead stock
    # ------------------------------------------------------------------

    async def get_dead_stock_items(self) -> list[DeadStockItem]:
        """Stock with no sales in the window, highest tied-up capital first."""
        materials = await self._material_store.list_materials()
        return await self._dead_stock(materials, datetime.now(UTC))

    async def _dead_stock(
        self, materials: list[Material], now: datetime
    ) -> list[DeadStockItem]:
        days = self._settings.dead_stock_days
        recent_sales = await self._ledger_store.aggregate_movements(
            since=now - timedelta(days=days),
            movement_type=MovementType.OUTWARD,
            reason=MovementReason.SALES.value,
        )
        sold = {a.material_id for a in recent_sales}

        items = []
        for material in materials:
            if material.available_quantity <= 0 or material.id in sold:
                continue
            capital = material.inventory_value
            items.append(
                DeadStockItem(
                    material=material,
                    alert=f"Dead stock: no sales in {days} days",
                    days_inactive=days,
                    tied_up_capital=_round2(capital),
                    recommendation=self._dead_stock_recommendation(
                        capital, material.available_quantity
                    ),
                )
            )

        items.sort(key=lambda i: i.tied_up_capital, reverse=True)
        return items

    def _dead_stock_recommendation(self, tied_up_capital: float, quantity: int) -> str:
        if tied_up_capital > self._settings.high_value_capital:
            return "High-value dead stock: consider discount sale or return to supplier"
        if quantity > self._settings.large_quantity:
            return "Large quantity sitting idle: consider promotional offer"
        return (
            f"Monitor for another {self._settings.dead_stock_days} days "
            "or consider bundling with fast-moving items"
        )

    # ------------------------------------------------------------------
    # Fast-moving
    # ------------------------------------------------------------------

    async def get_fast_moving_items(self, days: Any = None) -> list[FastMovingItem]:
        """
        Materials with high sales frequency or volume in the last ``days``.

        Args:
            days: Window length in days (positive integer, default from settings).

        Returns:
            Items sorted by sales velocity, fastest first.
        """
        if days is None:
            days = self._settings.fast_moving_days
        days = validate_positive_integer(days, "Days")
        if days > self._settings.max_window_days:
            raise ValidationError(
                "Days", f"cannot exceed {self._settings.max_window_days}", days
            )

        since = datetime.now(UTC) - timedelta(days=days)
        sales = await self._ledger_store.aggregate_movements(
            since=since,
            movement_type=MovementType.OUTWARD,
            reason=MovementReason.SALES.value,
        )
        qualifying = [
            a
            for a in sales
            if a.movement_count >= self._settings.fast_moving_min_sales
            or a.total_quantity >= self._settings.fast_moving_min_quantity
        ]
        if not qualifying:
            return []

        materials = {m.id: m for m in await self._material_store.list_materials()}
        items: list[tuple[float, FastMovingItem]] = []

        for agg in qualifying:
            material = materials.get(agg.material_id)
            if material is None:
                continue

            velocity = agg.total_quantity / days
            frequency = agg.movement_count / days
            if velocity > 0:
                days_remaining = math.floor(material.available_quantity / velocity)
            else:
                days_remaining = self._settings.stable_days_sentinel

            item = FastMovingItem(
                material=material,
                sales_metrics=SalesMetrics(
                    total_quantity_sold=agg.total_quantity,
                    sales_count=agg.movement_count,
                    sales_velocity=_round2(velocity),
                    sales_frequency=_round2(frequency),
                    last_sale_date=agg.last_movement_at,
                    period_days=days,
                ),
                stock_status=StockStatus(
                    current_stock=material.available_quantity,
                    days_of_stock_remaining=days_remaining,
                    recommended_reorder_quantity=math.ceil(
                        velocity * self._settings.reorder_buffer_days
                    ),
                ),
                urgency=fast_moving_urgency(days_remaining),
            )
            items.append((velocity, item))

        items.sort(key=lambda pair: pair[0], reverse=True)
        return [item for _, item in items]

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    async def get_dashboard_metrics(self) -> DashboardMetrics:
        now = datetime.now(UTC)
        materials = await self._material_store.list_materials()
        dead_stock = await self._dead_stock(materials, now)

        return DashboardMetrics(
            total_materials=len(materials),
            total_value=_round2(sum(m.inventory_value for m in materials)),
            total_quantity=sum(m.available_quantity for m in materials),
            total_damaged=sum(m.damaged_quantity for m in materials),
            low_stock_count=sum(1 for m in materials if m.is_low_stock),
            dead_stock_count=len(dead_stock),
            timestamp=now,
        )

    async def get_category_breakdown(self) -> list[CategoryBreakdown]:
        """Per-category counts and value, categories in alphabetical order."""
        materials = await self._material_store.list_materials()
        breakdown: dict[str, CategoryBreakdown] = {}
        values: dict[str, float] = {}

        for m in materials:
            entry = breakdown.setdefault(m.category, CategoryBreakdown(category=m.category))
            entry.count += 1
            entry.total_quantity += m.available_quantity
            values[m.category] = values.get(m.category, 0.0) + m.inventory_value
            entry.items.append(
                CategoryMember(
                    id=m.id,
                    sku=m.sku,
                    name=m.name,
                    quantity=m.available_quantity,
                )
            )

        result = []
        for category in sorted(breakdown):
            entry = breakdown[category]
            entry.total_value = _round2(values[category])
            result.append(entry)
        return result

    async def get_damaged_inventory_summary(self) -> DamagedInventorySummary:
        materials = await self._material_store.list_materials()
        damaged = sorted(
            (m for m in materials if m.damaged_quantity > 0),
            key=lambda m: m.damaged_quantity,
            reverse=True,
        )
        return DamagedInventorySummary(
            items=damaged,
            total_quantity=sum(m.damaged_quantity for m in damaged),
            total_value=_round2(sum(m.damaged_value for m in damaged)),
        )

    async def get_top_moving_skus(self, limit: Any = 10) -> list[TopMovingSku]:
        """Materials ranked by number of ledger entries of any kind."""
        limit = validate_positive_integer(limit, "Limit")
        aggregates = await self._ledger_store.aggregate_movements()
        aggregates.sort(key=lambda a: (-a.movement_count, a.material_id))

        materials = {m.id: m for m in await self._material_store.list_materials()}
        ranked = [
            TopMovingSku(material=materials[a.material_id], movement_count=a.movement_count)
            for a in aggregates
            if a.material_id in materials
        ]
        return ranked[:limit]

    async def get_comprehensive_insights(self) -> ComprehensiveInsights:
        """
        Fast-moving, dead-stock and low-stock views in one payload.

        total_issues counts critical fast-moving items, all dead stock and
        critical low-stock items. Lists are cut to the configured top N, and
        the low-stock list keeps only critical items.
        """
        fast_moving, dead_stock, low_stock = await asyncio.gather(
            self.get_fast_moving_items(),
            self.get_dead_stock_items(),
            self.get_low_stock_alerts(),
        )

        critical_fast = [i for i in fast_moving if i.urgency == Urgency.CRITICAL]
        critical_low = [i for i in low_stock if i.urgency == Urgency.CRITICAL]
        top_n = self._settings.comprehensive_top_n

        summary = InsightsSummary(
            fast_moving_count=len(fast_moving),
            dead_stock_count=len(dead_stock),
            low_stock_count=len(low_stock),
            total_issues=len(critical_fast) + len(dead_stock) + len(critical_low),
        )
        logger.info(
            "insight_evaluation_complete",
            fast_moving=summary.fast_moving_count,
            dead_stock=summary.dead_stock_count,
            low_stock=summary.low_stock_count,
            total_issues=summary.total_issues,
        )

        return ComprehensiveInsights(
            summary=summary,
            fast_moving_items=fast_moving[:top_n],
            dead_stock_items=dead_stock[:top_n],
            low_stock_items=critical_low[:top_n],
            timestamp=datetime.now(UTC),
        )
