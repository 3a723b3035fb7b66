"""Sales endpoints."""

from fastapi import APIRouter, Depends, status

from stockbook.api.dependencies import get_sales
from stockbook.application.dto.requests import RecordSaleRequest
from stockbook.application.dto.responses import ErrorResponse
from stockbook.core.entities.sale import SaleReceipt, SaleRecord, SalesSummary
from stockbook.core.services import SalesRecorderService

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SaleReceipt,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_sale(
    request: RecordSaleRequest,
    sales: SalesRecorderService = Depends(get_sales),
) -> SaleReceipt:
    """Record a sale by SKU and deduct it from stock."""
    return await sales.record_sale(
        sku=request.sku,
        quantity=request.quantity,
        reference=request.reference,
        customer_name=request.customer_name,
        sale_date=request.sale_date,
    )


@router.get(
    "",
    response_model=list[SaleRecord],
    responses={400: {"model": ErrorResponse}},
)
async def list_sales(
    start_date: str | None = None,
    end_date: str | None = None,
    limit: str = "100",
    sales: SalesRecorderService = Depends(get_sales),
) -> list[SaleRecord]:
    """Sales in an optional date window, newest first."""
    return await sales.list_sales(start=start_date, end=end_date, limit=limit)


@router.get(
    "/summary",
    response_model=SalesSummary,
    responses={400: {"model": ErrorResponse}},
)
async def get_sales_summary(
    start_date: str | None = None,
    end_date: str | None = None,
    sales: SalesRecorderService = Depends(get_sales),
) -> SalesSummary:
    """Totals, average order value and top products by revenue."""
    return await sales.get_sales_summary(start=start_date, end=end_date)


@router.get(
    "/sku/{sku}",
    response_model=list[SaleRecord],
    responses={404: {"model": ErrorResponse}},
)
async def list_sales_for_sku(
    sku: str,
    sales: SalesRecorderService = Depends(get_sales),
) -> list[SaleRecord]:
    """All sales of one product, newest first."""
    return await sales.list_sales_for_sku(sku)
