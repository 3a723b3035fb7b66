"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from stockbook.application.dto.requests import (
    CreateMaterialRequest,
    RecordDamageRequest,
    RecordMovementRequest,
    RecordSaleRequest,
    UpdateMaterialRequest,
)
from stockbook.application.dto.responses import (
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    MaterialDetailResponse,
    MaterialResponse,
    ProviderHealthResponse,
    StockMovementResponse,
)

__all__ = [
    # Requests
    "CreateMaterialRequest",
    "UpdateMaterialRequest",
    "RecordMovementRequest",
    "RecordDamageRequest",
    "RecordSaleRequest",
    # Responses
    "MaterialResponse",
    "MaterialDetailResponse",
    "StockMovementResponse",
    "DeleteResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
