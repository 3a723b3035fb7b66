"""
Insight entities produced by the inventory insights engine.

Pure Pydantic models, not persisted. Generated on demand from the current
material balances and the stock ledger.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from stockbook.core.entities.material import Material


class Urgency(str, Enum):
    """How soon a flagged item needs attention."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class LowStockAlert(BaseModel):
    """A material at or below its reorder level."""

    material: Material
    alert: str = "Low stock: reorder recommended"
    urgency: Urgency
    days_until_stockout: int | None = None


class DeadStockItem(BaseModel):
    """Stock on hand with no sales in the dead-stock window."""

    material: Material
    alert: str
    days_inactive: int
    tied_up_capital: float
    recommendation: str


class SalesMetrics(BaseModel):
    total_quantity_sold: int
    sales_count: int
    sales_velocity: float  # units per day
    sales_frequency: float  # transactions per day
    last_sale_date: datetime | None = None
    period_days: int


class StockStatus(BaseModel):
    current_stock: int
    days_of_stock_remaining: int
    recommended_reorder_quantity: int


class FastMovingItem(BaseModel):
    """A material whose sales volume or frequency crossed the threshold."""

    material: Material
    alert: str = "Fast-moving item: restock early to avoid stock-out"
    sales_metrics: SalesMetrics
    stock_status: StockStatus
    urgency: Urgency


class DashboardMetrics(BaseModel):
    total_materials: int
    total_value: float
    total_quantity: int
    total_damaged: int
    low_stock_count: int
    dead_stock_count: int
    timestamp: datetime


class CategoryMember(BaseModel):
    id: int
    sku: str
    name: str
    quantity: int


class CategoryBreakdown(BaseModel):
    category: str
    count: int = 0
    total_quantity: int = 0
    total_value: float = 0.0
    items: list[CategoryMember] = Field(default_factory=list)


class DamagedInventorySummary(BaseModel):
    items: list[Material] = Field(default_factory=list)
    total_quantity: int = 0
    total_value: float = 0.0


class TopMovingSku(BaseModel):
    material: Material
    movement_count: int


class InsightsSummary(BaseModel):
    fast_moving_count: int
    dead_stock_count: int
    low_stock_count: int
    total_issues: int


class ComprehensiveInsights(BaseModel):
    """All key insights in one payload."""

    summary: InsightsSummary
    fast_moving_items: list[FastMovingItem] = Field(default_factory=list)
    dead_stock_items: list[DeadStockItem] = Field(default_factory=list)
    low_stock_items: list[LowStockAlert] = Field(default_factory=list)
    timestamp: datetime
