"""Core domain entities."""

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
from stockbook.core.entities.material import Material, MaterialDetail, MaterialUpdate
from stockbook.core.entities.movement import (
    CUSTOMER_NOTE_PREFIX,
    MovementAggregate,
    MovementReason,
    MovementType,
    StockMovement,
)
from stockbook.core.entities.sale import (
    ProductSales,
    SaleReceipt,
    SaleRecord,
    SalesSummary,
)

__all__ = [
    # Material
    "Material",
    "MaterialDetail",
    "MaterialUpdate",
    # Ledger
    "StockMovement",
    "MovementType",
    "MovementReason",
    "MovementAggregate",
    "CUSTOMER_NOTE_PREFIX",
    # Sales
    "SaleReceipt",
    "SaleRecord",
    "ProductSales",
    "SalesSummary",
    # Insights
    "Urgency",
    "LowStockAlert",
    "DeadStockItem",
    "SalesMetrics",
    "StockStatus",
    "FastMovingItem",
    "DashboardMetrics",
    "CategoryMember",
    "CategoryBreakdown",
    "DamagedInventorySummary",
    "TopMovingSku",
    "InsightsSummary",
    "ComprehensiveInsights",
]
