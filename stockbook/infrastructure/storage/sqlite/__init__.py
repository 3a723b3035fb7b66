"""SQLite storage implementations."""

from stockbook.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockbook.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from stockbook.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore

# Aliases used by the application lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_material_store: SQLiteMaterialStore | None = None
_ledger_store: SQLiteLedgerStore | None = None


async def get_material_store() -> SQLiteMaterialStore:
    """Get singleton material store instance."""
    global _material_store
    if _material_store is None:
        _material_store = SQLiteMaterialStore()
    return _material_store


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteMaterialStore",
    "SQLiteLedgerStore",
    # Factory functions
    "get_material_store",
    "get_ledger_store",
]
