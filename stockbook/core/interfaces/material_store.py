"""Abstract interface for material catalog storage."""

from abc import ABC, abstractmethod

from stockbook.core.entities.material import Material


class IMaterialStore(ABC):
    """Interface for material persistence.

    Balances are read here but only ever written through ILedgerStore.
    """

    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Insert a material; raises DuplicateSkuError on SKU collision."""
        pass

    @abstractmethod
    async def get_material(self, material_id: int) -> Material | None:
        """Get material by ID."""
        pass

    @abstractmethod
    async def get_material_by_sku(self, sku: str) -> Material | None:
        """Get material by SKU, compared case-insensitively."""
        pass

    @abstractmethod
    async def list_materials(self) -> list[Material]:
        """List all materials, newest first."""
        pass

    @abstractmethod
    async def update_material(self, material: Material) -> Material:
        """Persist descriptive attributes; quantity columns are untouched."""
        pass

    @abstractmethod
    async def delete_material(self, material_id: int) -> bool:
        """Delete a material and its movements. Returns False if missing."""
        pass
