"""
Sales Recorder Service.

A sale is an OUTWARD ledger entry with reason "Sales". Recording one goes
through the stock ledger, so the balance guard and atomicity are the same
as for any other outward movement.
"""

from datetime import datetime
from typing import Any

from stockbook.config import get_logger
from stockbook.core.entities.material import Material
from stockbook.core.entities.movement import (
    CUSTOMER_NOTE_PREFIX,
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
from stockbook.core.exceptions import SkuNotFoundError, ValidationError
from stockbook.core.interfaces.ledger_store import ILedgerStore
from stockbook.core.interfaces.material_store import IMaterialStore
from stockbook.core.services.stock_ledger import StockLedgerService
from stockbook.core.validators import (
    normalize_sku,
    validate_positive_integer,
    validate_timestamp,
)

logger = get_logger(__name__)

TOP_PRODUCTS = 10


class SalesRecorderService:
    """Records sales by SKU and reports on them."""

    def __init__(
        self,
        material_store: IMaterialStore,
        ledger_store: ILedgerStore,
        stock_ledger: StockLedgerService | None = None,
    ) -> None:
        self._material_store = material_store
        self._ledger_store = ledger_store
        self._stock_ledger = stock_ledger or StockLedgerService(
            material_store, ledger_store
        )

    async def _require_sku(self, sku: Any) -> Material:
        sku = normalize_sku(sku)
        material = await self._material_store.get_material_by_sku(sku)
        if material is None:
            raise SkuNotFoundError(sku)
        return material

    @staticmethod
    def _date_window(
        start: Any, end: Any
    ) -> tuple[datetime | None, datetime | None]:
        start_at = validate_timestamp(start, "Start date") if start is not None else None
        end_at = validate_timestamp(end, "End date") if end is not None else None
        if start_at and end_at and start_at > end_at:
            raise ValidationError("Start date", "must not be after end date", start)
        return start_at, end_at

    async def record_sale(
        self,
        sku: Any,
        quantity: Any,
        reference: str | None = None,
        customer_name: str | None = None,
        sale_date: Any = None,
    ) -> SaleReceipt:
        """
        Record a sale and deduct it from stock.

        Args:
            sku: Product SKU, matched case-insensitively.
            quantity: Positive integer quantity sold.
            reference: Optional invoice or order reference.
            customer_name: Optional customer, stored in the movement notes.
            sale_date: Optional backdated sale time (defaults to now).

        Returns:
            SaleReceipt with the stock level before and after the sale.

        Raises:
            SkuNotFoundError: If no material has this SKU.
            InsufficientStockError: If the quantity exceeds available stock.
        """
        if sku is None or (isinstance(sku, str) and not sku.strip()):
            raise ValidationError("SKU", "is required")
        quantity = validate_positive_integer(quantity, "Quantity")
        material = await self._require_sku(sku)

        customer = customer_name.strip() if customer_name else None
        reference = reference.strip() if reference else None
        fields: dict[str, Any] = {}
        if sale_date is not None:
            fields["created_at"] = validate_timestamp(sale_date, "Sale date")

        movement = StockMovement(
            material_id=material.id,
            movement_type=MovementType.OUTWARD,
            quantity=quantity,
            reason=MovementReason.SALES.value,
            reference=reference or None,
            notes=f"{CUSTOMER_NOTE_PREFIX}{customer}" if customer else None,
            **fields,
        )
        movement, after = await self._stock_ledger.apply(movement)

        receipt = SaleReceipt(
            sale_id=movement.id,
            material_id=after.id,
            sku=after.sku,
            product_name=after.name,
            category=after.category,
            unit_price=after.unit_price,
            quantity_sold=quantity,
            total_amount=after.unit_price * quantity,
            reference=movement.reference,
            customer_name=customer or None,
            sale_date=movement.created_at,
            stock_before=after.available_quantity + quantity,
            stock_after=after.available_quantity,
            is_low_stock=after.is_low_stock,
        )
        logger.info(
            "sale_recorded",
            sale_id=receipt.sale_id,
            sku=receipt.sku,
            qty=quantity,
            stock_after=receipt.stock_after,
        )
        return receipt

    async def _sale_movements(
        self,
        material_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[StockMovement]:
        return await self._ledger_store.find_movements(
            material_id=material_id,
            movement_type=MovementType.OUTWARD,
            reason=MovementReason.SALES.value,
            start=start,
            end=end,
            limit=limit,
        )

    @staticmethod
    def _to_record(movement: StockMovement, material: Material | None) -> SaleRecord:
        return SaleRecord(
            sale_id=movement.id,
            material_id=movement.material_id,
            sku=material.sku if material else None,
            product_name=material.name if material else None,
            category=material.category if material else None,
            quantity_sold=movement.quantity,
            unit_price=material.unit_price if material else None,
            total_amount=material.unit_price * movement.quantity if material else None,
            reference=movement.reference,
            customer_name=movement.customer_name,
            sale_date=movement.created_at,
        )

    async def list_sales(
        self,
        start: Any = None,
        end: Any = None,
        limit: Any = 100,
    ) -> list[SaleRecord]:
        """Sales in an optional date window, newest first."""
        start_at, end_at = self._date_window(start, end)
        limit = validate_positive_integer(limit, "Limit")
        movements = await self._sale_movements(start=start_at, end=end_at, limit=limit)
        materials = {m.id: m for m in await self._material_store.list_materials()}
        return [self._to_record(mv, materials.get(mv.material_id)) for mv in movements]

    async def list_sales_for_sku(self, sku: Any) -> list[SaleRecord]:
        """All sales of one product, newest first."""
        material = await self._require_sku(sku)
        movements = await self._sale_movements(material_id=material.id)
        return [self._to_record(mv, material) for mv in movements]

    async def get_sales_summary(self, start: Any = None, end: Any = None) -> SalesSummary:
        """
        Totals over an optional date window.

        Revenue is valued at each product's current unit price.
        """
        start_at, end_at = self._date_window(start, end)
        movements = await self._sale_movements(start=start_at, end=end_at)
        materials = {m.id: m for m in await self._material_store.list_materials()}

        summary = SalesSummary(total_sales=len(movements))
        products: dict[str, ProductSales] = {}

        for movement in movements:
            summary.total_quantity_sold += movement.quantity
            material = materials.get(movement.material_id)
            if material is None:
                continue
            revenue = material.unit_price * movement.quantity
            summary.total_revenue += revenue

            product = products.setdefault(
                material.sku, ProductSales(sku=material.sku, name=material.name)
            )
            product.total_quantity += movement.quantity
            product.total_revenue += revenue
            product.sales_count += 1

        if summary.total_sales:
            summary.average_order_value = summary.total_revenue / summary.total_sales
        summary.top_products = sorted(
            products.values(), key=lambda p: p.total_revenue, reverse=True
        )[:TOP_PRODUCTS]
        return summary
