"""SQLite implementation of the stock movement ledger."""

from datetime import UTC, datetime
from typing import Any

import aiosqlite

from stockbook.config import get_logger
from stockbook.core.entities.material import Material
from stockbook.core.entities.movement import (
    MovementAggregate,
    MovementType,
    StockMovement,
)
from stockbook.core.exceptions import InsufficientStockError, MaterialNotFoundError
from stockbook.core.interfaces.ledger_store import ILedgerStore
from stockbook.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockbook.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore
from stockbook.infrastructure.storage.sqlite.timestamps import (
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


class SQLiteLedgerStore(ILedgerStore):
    """SQLite implementation of the append-only movement ledger."""

    async def append_movement(
        self, movement: StockMovement, damaged_delta: int = 0
    ) -> tuple[StockMovement, Material]:
        """
        Apply a movement to its material and append it, in one transaction.

        The balance update is a compare-and-swap: it only matches the row
        while the resulting quantity stays non-negative, so two concurrent
        writers cannot both spend the same stock.
        """
        delta = movement.signed_quantity
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE materials SET
                    available_quantity = available_quantity + ?,
                    damaged_quantity = damaged_quantity + ?,
                    updated_at = ?
                WHERE id = ? AND available_quantity + ? >= 0
                """,
                (
                    delta,
                    damaged_delta,
                    to_db_timestamp(datetime.now(UTC)),
                    movement.material_id,
                    delta,
                ),
            )
            if cursor.rowcount == 0:
                cursor = await conn.execute(
                    "SELECT available_quantity FROM materials WHERE id = ?",
                    (movement.material_id,),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise MaterialNotFoundError(movement.material_id)
                raise InsufficientStockError(
                    material_id=movement.material_id,
                    requested=movement.quantity,
                    available=int(row["available_quantity"]),
                )

            cursor = await conn.execute(
                """
                INSERT INTO stock_movements (
                    material_id, movement_type, quantity,
                    reason, reference, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.material_id,
                    movement.movement_type.value,
                    movement.quantity,
                    movement.reason,
                    movement.reference,
                    movement.notes,
                    to_db_timestamp(movement.created_at),
                ),
            )
            movement = movement.model_copy(update={"id": cursor.lastrowid})

            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (movement.material_id,)
            )
            material = SQLiteMaterialStore._row_to_material(await cursor.fetchone())

        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            material_id=movement.material_id,
            type=movement.movement_type.value,
            qty=movement.quantity,
            reason=movement.reason,
            balance=material.available_quantity,
        )
        return movement, material

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
        clauses: list[str] = []
        params: list[Any] = []
        if material_id is not None:
            clauses.append("material_id = ?")
            params.append(material_id)
        if movement_type is not None:
            clauses.append("movement_type = ?")
            params.append(movement_type.value)
        if reason is not None:
            clauses.append("reason = ?")
            params.append(reason)
        if start is not None:
            clauses.append("created_at >= ?")
            params.append(to_db_timestamp(start))
        if end is not None:
            clauses.append("created_at <= ?")
            params.append(to_db_timestamp(end))

        sql = "SELECT * FROM stock_movements"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def aggregate_movements(
        self,
        since: datetime | None = None,
        movement_type: MovementType | None = None,
        reason: str | None = None,
    ) -> list[MovementAggregate]:
        """Roll up matching movements per material, most movements first."""
        clauses: list[str] = []
        params: list[Any] = []
        if since is not None:
            clauses.append("created_at >= ?")
            params.append(to_db_timestamp(since))
        if movement_type is not None:
            clauses.append("movement_type = ?")
            params.append(movement_type.value)
        if reason is not None:
            clauses.append("reason = ?")
            params.append(reason)

        sql = """
            SELECT material_id,
                   SUM(quantity) AS total_quantity,
                   COUNT(*) AS movement_count,
                   MAX(created_at) AS last_movement_at
            FROM stock_movements
        """
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " GROUP BY material_id ORDER BY movement_count DESC, material_id"

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()

        return [
            MovementAggregate(
                material_id=row["material_id"],
                total_quantity=int(row["total_quantity"]),
                movement_count=int(row["movement_count"]),
                last_movement_at=(
                    from_db_timestamp(row["last_movement_at"])
                    if row["last_movement_at"]
                    else None
                ),
            )
            for row in rows
        ]

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            material_id=row["material_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=int(row["quantity"]),
            reason=row["reason"],
            reference=row["reference"],
            notes=row["notes"],
            created_at=from_db_timestamp(row["created_at"]),
        )
