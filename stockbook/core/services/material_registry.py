"""Material Registry Service: the catalog of trackable items."""

from typing import Any

from stockbook.config import get_logger
from stockbook.core.entities.material import Material, MaterialDetail, MaterialUpdate
from stockbook.core.exceptions import (
    DuplicateSkuError,
    MaterialNotFoundError,
    SkuNotFoundError,
)
from stockbook.core.interfaces.ledger_store import ILedgerStore
from stockbook.core.interfaces.material_store import IMaterialStore
from stockbook.core.validators import (
    normalize_sku,
    validate_non_empty_string,
    validate_non_negative_integer,
    validate_non_negative_number,
    validate_positive_integer,
)

logger = get_logger(__name__)


class MaterialRegistryService:
    """
    Owns SKU identity and the descriptive attributes of materials.

    Quantities are never written here: new materials start at zero and only
    the stock ledger moves them afterwards.
    """

    def __init__(
        self,
        material_store: IMaterialStore,
        ledger_store: ILedgerStore,
        default_reorder_level: int = 10,
        recent_movements: int = 10,
    ) -> None:
        self._material_store = material_store
        self._ledger_store = ledger_store
        self._default_reorder_level = default_reorder_level
        self._recent_movements = recent_movements

    async def _ensure_sku_free(self, sku: str, exclude_id: int | None = None) -> None:
        existing = await self._material_store.get_material_by_sku(sku)
        if existing is not None and existing.id != exclude_id:
            raise DuplicateSkuError(sku)

    async def _require(self, material_id: Any) -> Material:
        material_id = validate_positive_integer(material_id, "Material ID")
        material = await self._material_store.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)
        return material

    async def create_material(
        self,
        sku: Any,
        name: Any,
        category: Any,
        supplier: Any,
        unit_price: Any,
        reorder_level: Any = None,
    ) -> Material:
        """
        Register a new material with zero stock.

        Raises:
            ValidationError: If any attribute fails validation.
            DuplicateSkuError: If the SKU is taken (case-insensitive).
        """
        material = Material(
            sku=normalize_sku(sku),
            name=validate_non_empty_string(name, "Name"),
            category=validate_non_empty_string(category, "Category"),
            supplier=validate_non_empty_string(supplier, "Supplier"),
            unit_price=validate_non_negative_number(unit_price, "Unit price"),
            reorder_level=validate_non_negative_integer(
                reorder_level, "Reorder level", default=self._default_reorder_level
            ),
        )
        await self._ensure_sku_free(material.sku)
        return await self._material_store.create_material(material)

    async def update_material(
        self,
        material_id: Any,
        changes: MaterialUpdate | dict[str, Any],
    ) -> Material:
        """
        Apply a partial update of descriptive attributes.

        Fields left as None are unchanged. There is no way to set quantities.
        """
        if isinstance(changes, dict):
            changes = MaterialUpdate.from_dict(changes)

        material = await self._require(material_id)
        if changes.is_empty():
            return material
        updates: dict[str, Any] = {}

        if changes.sku is not None:
            sku = normalize_sku(changes.sku)
            if sku != material.sku.upper():
                await self._ensure_sku_free(sku, exclude_id=material.id)
                logger.info(
                    "material_sku_changed",
                    material_id=material.id,
                    old_sku=material.sku,
                    new_sku=sku,
                )
            updates["sku"] = sku
        if changes.name is not None:
            updates["name"] = validate_non_empty_string(changes.name, "Name")
        if changes.category is not None:
            updates["category"] = validate_non_empty_string(changes.category, "Category")
        if changes.supplier is not None:
            updates["supplier"] = validate_non_empty_string(changes.supplier, "Supplier")
        if changes.unit_price is not None:
            updates["unit_price"] = validate_non_negative_number(
                changes.unit_price, "Unit price"
            )
        if changes.reorder_level is not None:
            updates["reorder_level"] = validate_non_negative_integer(
                changes.reorder_level, "Reorder level"
            )

        if not updates:
            return material
        return await self._material_store.update_material(
            material.model_copy(update=updates)
        )

    async def delete_material(self, material_id: Any) -> Material:
        """Delete a material together with its whole movement history."""
        material = await self._require(material_id)
        if not await self._material_store.delete_material(material.id):
            raise MaterialNotFoundError(material.id)
        return material

    async def get_material(self, material_id: Any) -> MaterialDetail:
        """Material plus its most recent movements, newest first."""
        material = await self._require(material_id)
        movements = await self._ledger_store.find_movements(
            material_id=material.id, limit=self._recent_movements
        )
        return MaterialDetail(material=material, recent_movements=movements)

    async def get_material_by_sku(self, sku: Any) -> Material:
        sku = normalize_sku(sku)
        material = await self._material_store.get_material_by_sku(sku)
        if material is None:
            raise SkuNotFoundError(sku)
        return material

    async def list_materials(self) -> list[Material]:
        return await self._material_store.list_materials()
