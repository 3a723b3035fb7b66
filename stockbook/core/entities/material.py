"""
Material domain entity for the inventory catalog.

Quantities on a Material are derived from the stock ledger. Nothing in the
registry writes them; see MaterialUpdate for the fields a client may change.
"""

from dataclasses import dataclass, fields
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from stockbook.core.entities.movement import StockMovement


class Material(BaseModel):
    """A trackable item with its ledger-maintained balances."""

    id: int | None = None
    sku: str
    name: str
    category: str
    supplier: str
    unit_price: float = Field(ge=0)
    available_quantity: int = Field(default=0, ge=0)
    damaged_quantity: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=10, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def inventory_value(self) -> float:
        """Value of on-hand stock at the current unit price."""
        return self.unit_price * self.available_quantity

    @property
    def damaged_value(self) -> float:
        return self.unit_price * self.damaged_quantity

    @property
    def is_low_stock(self) -> bool:
        return self.available_quantity <= self.reorder_level


@dataclass(frozen=True)
class MaterialUpdate:
    """
    Partial update of a material's descriptive attributes.

    Has no quantity fields: balances only change through the stock ledger.
    """

    sku: Any = None
    name: Any = None
    category: Any = None
    supplier: Any = None
    unit_price: Any = None
    reorder_level: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MaterialUpdate":
        """Build from a loose mapping, dropping keys that are not updatable."""
        allowed = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in allowed})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


class MaterialDetail(BaseModel):
    """A material joined with its most recent ledger entries."""

    material: Material
    recent_movements: list[StockMovement] = Field(default_factory=list)
