"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization. Sales and insight read
models from the core are already plain Pydantic models and are returned
as they are.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from stockbook.core.entities.material import Material, MaterialDetail
from stockbook.core.entities.movement import StockMovement


class MaterialResponse(BaseModel):
    """Material response DTO."""

    id: int
    sku: str
    name: str
    category: str
    supplier: str
    unit_price: float
    available_quantity: int
    damaged_quantity: int
    reorder_level: int
    inventory_value: float
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, material: Material) -> "MaterialResponse":
        return cls(
            id=material.id,  # type: ignore[arg-type]
            sku=material.sku,
            name=material.name,
            category=material.category,
            supplier=material.supplier,
            unit_price=material.unit_price,
            available_quantity=material.available_quantity,
            damaged_quantity=material.damaged_quantity,
            reorder_level=material.reorder_level,
            inventory_value=round(material.inventory_value, 2),
            is_low_stock=material.is_low_stock,
            created_at=material.created_at,
            updated_at=material.updated_at,
        )


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    id: int
    material_id: int
    movement_type: str
    quantity: int
    reason: str
    reference: str | None = None
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, movement: StockMovement) -> "StockMovementResponse":
        return cls(
            id=movement.id,  # type: ignore[arg-type]
            material_id=movement.material_id,
            movement_type=movement.movement_type.value,
            quantity=movement.quantity,
            reason=movement.reason,
            reference=movement.reference,
            notes=movement.notes,
            created_at=movement.created_at,
        )


class MaterialDetailResponse(MaterialResponse):
    """Material with its most recent movements."""

    movements: list[StockMovementResponse] = Field(default_factory=list)

    @classmethod
    def from_detail(cls, detail: MaterialDetail) -> "MaterialDetailResponse":
        base = MaterialResponse.from_entity(detail.material)
        return cls(
            **base.model_dump(),
            movements=[
                StockMovementResponse.from_entity(m) for m in detail.recent_movements
            ],
        )


class DeleteResponse(BaseModel):
    """Acknowledgement of a deletion."""

    message: str
    id: int


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    schema_version: str | None = None
    pool: dict[str, int] | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. MATERIAL_NOT_FOUND)
    - kind: error family (validation, not_found, conflict, ...)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    kind: str | None = Field(default=None, description="Error family")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
