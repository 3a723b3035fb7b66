"""Sales read models built on top of OUTWARD/Sales ledger entries."""

from datetime import datetime

from pydantic import BaseModel, Field


class SaleReceipt(BaseModel):
    """Result of recording a sale, with the balance before and after."""

    sale_id: int
    material_id: int
    sku: str
    product_name: str
    category: str
    unit_price: float
    quantity_sold: int
    total_amount: float
    reference: str | None = None
    customer_name: str | None = None
    sale_date: datetime
    stock_before: int
    stock_after: int
    is_low_stock: bool


class SaleRecord(BaseModel):
    """A past sale joined with its product."""

    sale_id: int
    material_id: int
    sku: str | None = None
    product_name: str | None = None
    category: str | None = None
    quantity_sold: int
    unit_price: float | None = None
    total_amount: float | None = None
    reference: str | None = None
    customer_name: str | None = None
    sale_date: datetime


class ProductSales(BaseModel):
    """Sales totals for one product."""

    sku: str
    name: str
    total_quantity: int = 0
    total_revenue: float = 0.0
    sales_count: int = 0


class SalesSummary(BaseModel):
    """Aggregate sales over an optional date range."""

    total_sales: int = 0
    total_quantity_sold: int = 0
    total_revenue: float = 0.0
    average_order_value: float = 0.0
    top_products: list[ProductSales] = Field(default_factory=list)
