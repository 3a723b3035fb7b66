"""Abstract interface for the stock movement ledger."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockbook.core.entities.material import Material
from stockbook.core.entities.movement import (
    MovementAggregate,
    MovementType,
    StockMovement,
)


class ILedgerStore(ABC):
    """Interface for append-only stock movement persistence."""

    @abstractmethod
    async def append_movement(
        self, movement: StockMovement, damaged_delta: int = 0
    ) -> tuple[StockMovement, Material]:
        """
        Append a movement and apply it to the material balance atomically.

        Raises InsufficientStockError if the balance would go negative and
        MaterialNotFoundError if the material is gone; nothing is written
        in either case.

        Returns:
            The stored movement and the material as it stands afterwards.
        """
        pass

    @abstractmethod
    async def find_movements(
        self,
        material_id: int | None = None,
        movement_type: MovementType | None = None,
        reason: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
    ) -> list[StockMovement]:
        """Find movements matching all given filters, newest first."""
        pass

    @abstractmethod
    async def aggregate_movements(
        self,
        since: datetime | None = None,
        movement_type: MovementType | None = None,
        reason: str | None = None,
    ) -> list[MovementAggregate]:
        """Roll up matching movements per material."""
        pass
