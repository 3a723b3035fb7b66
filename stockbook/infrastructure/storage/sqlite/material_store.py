"""SQLite implementation of material catalog storage."""

from datetime import UTC, datetime

import aiosqlite

from stockbook.config import get_logger
from stockbook.core.entities.material import Material
from stockbook.core.exceptions import DuplicateSkuError
from stockbook.core.interfaces.material_store import IMaterialStore
from stockbook.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockbook.infrastructure.storage.sqlite.timestamps import (
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


class SQLiteMaterialStore(IMaterialStore):
    """SQLite implementation of material storage."""

    async def create_material(self, material: Material) -> Material:
        """Insert a new material with zero balances."""
        now = datetime.now(UTC)
        material = material.model_copy(
            update={
                "available_quantity": 0,
                "damaged_quantity": 0,
                "created_at": now,
                "updated_at": now,
            }
        )
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO materials (
                        sku, name, category, supplier, unit_price,
                        available_quantity, damaged_quantity, reorder_level,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, 0, 0, ?, ?, ?)
                    """,
                    (
                        material.sku,
                        material.name,
                        material.category,
                        material.supplier,
                        material.unit_price,
                        material.reorder_level,
                        to_db_timestamp(material.created_at),
                        to_db_timestamp(material.updated_at),
                    ),
                )
                material.id = cursor.lastrowid
        except aiosqlite.IntegrityError:
            raise DuplicateSkuError(material.sku) from None

        logger.info("material_created", material_id=material.id, sku=material.sku)
        return material

    async def get_material(self, material_id: int) -> Material | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_material(row) if row else None

    async def get_material_by_sku(self, sku: str) -> Material | None:
        """Get material by SKU (NOCASE collation on the column)."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE sku = ?", (sku.strip(),)
            )
            row = await cursor.fetchone()
            return self._row_to_material(row) if row else None

    async def list_materials(self) -> list[Material]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials ORDER BY created_at DESC, id DESC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_material(row) for row in rows]

    async def update_material(self, material: Material) -> Material:
        """Update descriptive attributes. Balances are owned by the ledger."""
        updated_at = datetime.now(UTC)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    UPDATE materials SET
                        sku = ?,
                        name = ?,
                        category = ?,
                        supplier = ?,
                        unit_price = ?,
                        reorder_level = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        material.sku,
                        material.name,
                        material.category,
                        material.supplier,
                        material.unit_price,
                        material.reorder_level,
                        to_db_timestamp(updated_at),
                        material.id,
                    ),
                )
                cursor = await conn.execute(
                    "SELECT * FROM materials WHERE id = ?", (material.id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.IntegrityError:
            raise DuplicateSkuError(material.sku) from None

        logger.info("material_updated", material_id=material.id)
        return self._row_to_material(row)

    async def delete_material(self, material_id: int) -> bool:
        """Delete the material's movements, then the material, in one transaction."""
        async with get_transaction() as conn:
            movements = await conn.execute(
                "DELETE FROM stock_movements WHERE material_id = ?", (material_id,)
            )
            cursor = await conn.execute(
                "DELETE FROM materials WHERE id = ?", (material_id,)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(
                "material_deleted",
                material_id=material_id,
                movements_deleted=movements.rowcount,
            )
        return deleted

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        """Convert a database row to a Material entity."""
        return Material(
            id=row["id"],
            sku=row["sku"],
            name=row["name"],
            category=row["category"],
            supplier=row["supplier"],
            unit_price=float(row["unit_price"]),
            available_quantity=int(row["available_quantity"]),
            damaged_quantity=int(row["damaged_quantity"]),
            reorder_level=int(row["reorder_level"]),
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
        )
