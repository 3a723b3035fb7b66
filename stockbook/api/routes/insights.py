"""Inventory insights endpoints (read-only)."""

from fastapi import APIRouter, Depends

from stockbook.api.dependencies import get_insights
from stockbook.application.dto.responses import ErrorResponse
from stockbook.core.entities.insight import (
    CategoryBreakdown,
    ComprehensiveInsights,
    DamagedInventorySummary,
    DashboardMetrics,
    DeadStockItem,
    FastMovingItem,
    LowStockAlert,
    TopMovingSku,
)
from stockbook.core.services import InventoryInsightsService

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/dashboard", response_model=DashboardMetrics)
async def get_dashboard(
    insights: InventoryInsightsService = Depends(get_insights),
) -> DashboardMetrics:
    return await insights.get_dashboard_metrics()


@router.get("/low-stock", response_model=list[LowStockAlert])
async def get_low_stock(
    insights: InventoryInsightsService = Depends(get_insights),
) -> list[LowStockAlert]:
    """Materials at or below their reorder level, critical first."""
    return await insights.get_low_stock_alerts()


@router.get("/dead-stock", response_model=list[DeadStockItem])
async def get_dead_stock(
    insights: InventoryInsightsService = Depends(get_insights),
) -> list[DeadStockItem]:
    """Stock with no recent sales, highest tied-up capital first."""
    return await insights.get_dead_stock_items()


@router.get(
    "/top-skus",
    response_model=list[TopMovingSku],
    responses={400: {"model": ErrorResponse}},
)
async def get_top_skus(
    limit: str = "10",
    insights: InventoryInsightsService = Depends(get_insights),
) -> list[TopMovingSku]:
    """Materials ranked by number of stock movements."""
    return await insights.get_top_moving_skus(limit=limit)


@router.get("/damaged-inventory", response_model=DamagedInventorySummary)
async def get_damaged_inventory(
    insights: InventoryInsightsService = Depends(get_insights),
) -> DamagedInventorySummary:
    return await insights.get_damaged_inventory_summary()


@router.get("/category-breakdown", response_model=list[CategoryBreakdown])
async def get_category_breakdown(
    insights: InventoryInsightsService = Depends(get_insights),
) -> list[CategoryBreakdown]:
    return await insights.get_category_breakdown()


@router.get(
    "/fast-moving",
    response_model=list[FastMovingItem],
    responses={400: {"model": ErrorResponse}},
)
async def get_fast_moving(
    days: str | None = None,
    insights: InventoryInsightsService = Depends(get_insights),
) -> list[FastMovingItem]:
    """Items with high sales frequency or volume over the last ``days`` days."""
    return await insights.get_fast_moving_items(days=days)


@router.get("/comprehensive", response_model=ComprehensiveInsights)
async def get_comprehensive(
    insights: InventoryInsightsService = Depends(get_insights),
) -> ComprehensiveInsights:
    """Fast-moving, dead-stock and low-stock insights in one payload."""
    return await insights.get_comprehensive_insights()
