"""Request/response schemas for the identification API."""

from .identification_schemas import (
    DeleteIdentificationResponse,
    ErrorResponse,
    IdentificationHistoryItem,
    IdentificationHistoryResponse,
    IdentificationResponse,
)

__all__ = [
    "DeleteIdentificationResponse",
    "ErrorResponse",
    "IdentificationHistoryItem",
    "IdentificationHistoryResponse",
    "IdentificationResponse",
]
