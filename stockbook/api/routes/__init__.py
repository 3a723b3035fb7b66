"""API route modules."""

from stockbook.api.routes.health import router as health_router
from stockbook.api.routes.insights import router as insights_router
from stockbook.api.routes.materials import router as materials_router
from stockbook.api.routes.sales import router as sales_router
from stockbook.api.routes.stock_movements import router as stock_movements_router

__all__ = [
    "health_router",
    "materials_router",
    "stock_movements_router",
    "sales_router",
    "insights_router",
]
