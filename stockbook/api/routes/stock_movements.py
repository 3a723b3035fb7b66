"""Stock movement (ledger) endpoints."""

from fastapi import APIRouter, Depends, status

from stockbook.api.dependencies import get_ledger
from stockbook.application.dto.requests import RecordDamageRequest, RecordMovementRequest
from stockbook.application.dto.responses import ErrorResponse, StockMovementResponse
from stockbook.core.services import StockLedgerService

router = APIRouter(prefix="/api/stock-movements", tags=["stock-movements"])


@router.post(
    "",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_movement(
    request: RecordMovementRequest,
    ledger: StockLedgerService = Depends(get_ledger),
) -> StockMovementResponse:
    """Record an INWARD or OUTWARD movement and update the balance."""
    movement = await ledger.record_movement(
        material_id=request.material_id,
        movement_type=request.movement_type,
        quantity=request.quantity,
        reason=request.reason,
        reference=request.reference,
        notes=request.notes,
    )
    return StockMovementResponse.from_entity(movement)


@router.get("", response_model=list[StockMovementResponse])
async def list_movements(
    limit: str = "100",
    ledger: StockLedgerService = Depends(get_ledger),
) -> list[StockMovementResponse]:
    """Most recent movements across all materials."""
    movements = await ledger.list_movements(limit=limit)
    return [StockMovementResponse.from_entity(m) for m in movements]


@router.get(
    "/range",
    response_model=list[StockMovementResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_movements_between(
    start_date: str | None = None,
    end_date: str | None = None,
    ledger: StockLedgerService = Depends(get_ledger),
) -> list[StockMovementResponse]:
    """Movements with created_at inside [start_date, end_date]."""
    movements = await ledger.list_movements_between(start_date, end_date)
    return [StockMovementResponse.from_entity(m) for m in movements]


@router.get(
    "/material/{material_id}",
    response_model=list[StockMovementResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_movements_for_material(
    material_id: str,
    ledger: StockLedgerService = Depends(get_ledger),
) -> list[StockMovementResponse]:
    """Full movement history of one material, newest first."""
    movements = await ledger.list_movements_for_material(material_id)
    return [StockMovementResponse.from_entity(m) for m in movements]


@router.post(
    "/damage",
    response_model=StockMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def record_damage(
    request: RecordDamageRequest,
    ledger: StockLedgerService = Depends(get_ledger),
) -> StockMovementResponse:
    """Mark stock as damaged: moves it from available to damaged."""
    movement = await ledger.record_damage(
        material_id=request.material_id,
        quantity=request.quantity,
        reason=request.reason,
    )
    return StockMovementResponse.from_entity(movement)
