"""Stock movement (ledger) domain entities."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MovementType(str, Enum):
    """Direction of a stock movement."""

    INWARD = "INWARD"
    OUTWARD = "OUTWARD"


class MovementReason(str, Enum):
    """Reasons with meaning to the insights engine; others stay free text."""

    PURCHASE = "Purchase"
    SALES = "Sales"
    DAMAGE = "Damage"
    MANUAL_ADJUSTMENT = "Manual adjustment"


CUSTOMER_NOTE_PREFIX = "Customer: "


class StockMovement(BaseModel):
    """One immutable entry of the stock ledger."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    material_id: int  # FK → materials.id
    movement_type: MovementType
    quantity: int = Field(gt=0)
    reason: str = MovementReason.MANUAL_ADJUSTMENT.value
    reference: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def signed_quantity(self) -> int:
        """Quantity as applied to the balance (+ inward, - outward)."""
        if self.movement_type == MovementType.INWARD:
            return self.quantity
        return -self.quantity

    @property
    def customer_name(self) -> str | None:
        """Customer recorded on a sale, parsed back out of the notes."""
        if self.notes and self.notes.startswith(CUSTOMER_NOTE_PREFIX):
            return self.notes[len(CUSTOMER_NOTE_PREFIX):]
        return None


@dataclass
class MovementAggregate:
    """Per-material roll-up of ledger entries."""

    material_id: int
    total_quantity: int
    movement_count: int
    last_movement_at: datetime | None = None
