"""Core interfaces (ports) for dependency injection."""

from stockbook.core.interfaces.ledger_store import ILedgerStore
from stockbook.core.interfaces.material_store import IMaterialStore

__all__ = [
    "ILedgerStore",
    "IMaterialStore",
]
