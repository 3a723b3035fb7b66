"""Request DTOs for API endpoints.

Pydantic v2 models for API request parsing. Numeric fields are accepted
loosely (numbers or numeric strings) and checked by the core validators,
so every rule violation surfaces as the same VALIDATION_ERROR.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateMaterialRequest(BaseModel):
    """Request to register a new material."""

    sku: str | None = Field(default=None, examples=["TILE-001"])
    name: str | None = Field(default=None, examples=["Ceramic Floor Tile 60x60"])
    category: str | None = Field(default=None, examples=["Tiles"])
    supplier: str | None = Field(default=None, examples=["Kajaria Ceramics"])
    unit_price: Any = Field(default=None, description="Non-negative price", examples=[45.5])
    reorder_level: Any = Field(
        default=None,
        description="Low-stock threshold (defaults to 10)",
        examples=[20],
    )


class UpdateMaterialRequest(BaseModel):
    """Partial update of descriptive attributes.

    Quantity fields are not part of this contract; unknown keys such as
    ``available_quantity`` are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    sku: str | None = None
    name: str | None = None
    category: str | None = None
    supplier: str | None = None
    unit_price: Any = None
    reorder_level: Any = None


class RecordMovementRequest(BaseModel):
    """Request to record an INWARD or OUTWARD stock movement."""

    material_id: Any = Field(default=None, examples=[1])
    movement_type: Any = Field(default=None, examples=["INWARD", "OUTWARD"])
    quantity: Any = Field(default=None, examples=[50])
    reason: str | None = Field(default=None, examples=["Purchase"])
    reference: str | None = Field(default=None, examples=["PO-2024-001"])
    notes: str | None = None


class RecordDamageRequest(BaseModel):
    """Request to move stock from available to damaged."""

    material_id: Any = Field(default=None, examples=[1])
    quantity: Any = Field(default=None, examples=[2])
    reason: str | None = Field(
        default=None,
        description="Free-text description, stored in the movement notes",
        examples=["Broken in transit"],
    )


class RecordSaleRequest(BaseModel):
    """Request to record a sale by SKU."""

    sku: str | None = Field(default=None, examples=["TILE-001"])
    quantity: Any = Field(default=None, examples=[5])
    reference: str | None = Field(default=None, examples=["INV-1001"])
    customer_name: str | None = Field(default=None, examples=["Acme Builders"])
    sale_date: Any = Field(
        default=None,
        description="ISO-8601 sale time, defaults to now",
        examples=["2024-05-01T10:30:00Z"],
    )
