"""
Stock Ledger Service.

The only code path that changes a material's on-hand quantity. Each call
appends one movement and applies its signed quantity to the balance in a
single storage transaction.
"""

from datetime import datetime
from typing import Any

from stockbook.config import get_logger
from stockbook.core.entities.material import Material
from stockbook.core.entities.movement import MovementReason, MovementType, StockMovement
from stockbook.core.exceptions import (
    InsufficientStockError,
    MaterialNotFoundError,
    ValidationError,
)
from stockbook.core.interfaces.ledger_store import ILedgerStore
from stockbook.core.interfaces.material_store import IMaterialStore
from stockbook.core.validators import (
    validate_positive_integer,
    validate_timestamp,
)

logger = get_logger(__name__)


def parse_movement_type(value: Any) -> MovementType:
    """Accept a MovementType or its string value."""
    if isinstance(value, MovementType):
        return value
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Movement type", "is required")
    try:
        return MovementType(str(value).strip().upper())
    except ValueError:
        raise ValidationError(
            "Movement type", "must be either INWARD or OUTWARD", value
        ) from None


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class StockLedgerService:
    """
    Records stock movements against materials.

    Depends only on core interfaces. Balance checks happen twice: once here
    against the current balance for a clear error, and again inside the
    store's conditional update so a concurrent writer cannot overdraw.
    """

    def __init__(
        self,
        material_store: IMaterialStore,
        ledger_store: ILedgerStore,
    ) -> None:
        self._material_store = material_store
        self._ledger_store = ledger_store

    async def _require_material(self, material_id: Any) -> Material:
        material_id = validate_positive_integer(material_id, "Material ID")
        material = await self._material_store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)
        return material

    async def apply(
        self, movement: StockMovement, damaged_delta: int = 0
    ) -> tuple[StockMovement, Material]:
        """
        Append a validated movement and return it with the updated material.

        Raises:
            MaterialNotFoundError: If the material does not exist.
            InsufficientStockError: If an outward movement exceeds the balance.
        """
        material = await self._require_material(movement.material_id)
        if (
            movement.movement_type == MovementType.OUTWARD
            and movement.quantity > material.available_quantity
        ):
            raise InsufficientStockError(
                material_id=material.id,
                requested=movement.quantity,
                available=material.available_quantity,
            )
        return await self._ledger_store.append_movement(
            movement, damaged_delta=damaged_delta
        )

    async def record_movement(
        self,
        material_id: Any,
        movement_type: Any,
        quantity: Any,
        reason: str | None = None,
        reference: str | None = None,
        notes: str | None = None,
    ) -> StockMovement:
        """
        Record an INWARD or OUTWARD movement.

        Args:
            material_id: Material to move stock for.
            movement_type: MovementType or its string value.
            quantity: Positive integer quantity.
            reason: Free text, defaults to "Manual adjustment".
            reference: Optional external reference (PO, invoice number).
            notes: Optional notes.

        Returns:
            The stored movement.
        """
        material_id = validate_positive_integer(material_id, "Material ID")
        movement = StockMovement(
            material_id=material_id,
            movement_type=parse_movement_type(movement_type),
            quantity=validate_positive_integer(quantity, "Quantity"),
            reason=_optional_text(reason) or MovementReason.MANUAL_ADJUSTMENT.value,
            reference=_optional_text(reference),
            notes=_optional_text(notes),
        )
        movement, _ = await self.apply(movement)
        return movement

    async def record_damage(
        self,
        material_id: Any,
        quantity: Any,
        reason: str | None = None,
    ) -> StockMovement:
        """Move stock from available to damaged. The caller's reason goes to notes."""
        material_id = validate_positive_integer(material_id, "Material ID")
        quantity = validate_positive_integer(quantity, "Quantity")
        movement = StockMovement(
            material_id=material_id,
            movement_type=MovementType.OUTWARD,
            quantity=quantity,
            reason=MovementReason.DAMAGE.value,
            notes=_optional_text(reason) or MovementReason.DAMAGE.value,
        )
        movement, material = await self.apply(movement, damaged_delta=quantity)
        logger.info(
            "damage_recorded",
            material_id=material_id,
            qty=quantity,
            damaged_total=material.damaged_quantity,
        )
        return movement

    async def list_movements_for_material(self, material_id: Any) -> list[StockMovement]:
        """All movements of one material, newest first."""
        material_id = validate_positive_integer(material_id, "Material ID")
        return await self._ledger_store.find_movements(material_id=material_id)

    async def list_movements(self, limit: Any = 100) -> list[StockMovement]:
        """Most recent movements across all materials."""
        limit = validate_positive_integer(limit, "Limit")
        return await self._ledger_store.find_movements(limit=limit)

    async def list_movements_between(self, start: Any, end: Any) -> list[StockMovement]:
        """Movements with ``start <= created_at <= end``, newest first."""
        start_at: datetime = validate_timestamp(start, "Start date")
        end_at: datetime = validate_timestamp(end, "End date")
        if start_at > end_at:
            raise ValidationError("Start date", "must not be after end date", start)
        return await self._ledger_store.find_movements(start=start_at, end=end_at)
