"""
Domain exceptions for the Stockbook application.

Every error carries an ErrorKind tag so callers can branch on the kind
instead of parsing messages.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by the core."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INSUFFICIENT_STOCK = "insufficient_stock"
    STORAGE = "storage"


class StockbookError(Exception):
    """Base exception for all Stockbook errors."""

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


# Validation
class ValidationError(StockbookError):
    """Input validation failed."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"{field} {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )
        self.field = field


# Lookup
class NotFoundError(StockbookError):
    """Referenced record does not exist."""

    kind = ErrorKind.NOT_FOUND


class MaterialNotFoundError(NotFoundError):
    """Material id does not resolve."""

    def __init__(self, material_id: int):
        super().__init__(
            f"Material not found: {material_id}",
            code="MATERIAL_NOT_FOUND",
            details={"material_id": material_id},
        )


class SkuNotFoundError(NotFoundError):
    """No material carries the given SKU."""

    def __init__(self, sku: str):
        super().__init__(
            f"Material with SKU {sku} not found",
            code="SKU_NOT_FOUND",
            details={"sku": sku},
        )


# Conflicts
class ConflictError(StockbookError):
    """Write would violate a uniqueness rule."""

    kind = ErrorKind.CONFLICT


class DuplicateSkuError(ConflictError):
    """Another material already uses this SKU (case-insensitive)."""

    def __init__(self, sku: str):
        super().__init__(
            f"Material with SKU {sku} already exists",
            code="DUPLICATE_SKU",
            details={"sku": sku},
        )


# Stock
class InsufficientStockError(StockbookError):
    """Outward quantity exceeds what is on hand."""

    kind = ErrorKind.INSUFFICIENT_STOCK

    def __init__(self, material_id: int | str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {material_id}. "
            f"Available: {available}, Requested: {requested}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "requested": requested,
                "available": available,
            },
        )
        self.requested = requested
        self.available = available


# Storage
class StorageError(StockbookError):
    """Base exception for storage operations."""

    kind = ErrorKind.STORAGE


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )
