# 📄 File: app/modules/plant_identification/presentation/api/schemas/identification_schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes exactly what the app receives back from the identification endpoints: the answer
# envelope, the history list and the error shape.
#
# 🧪 Purpose (Technical Summary):
# Pydantic response envelopes for the identification API ({success, message, data} and
# {success, data, count}) plus a history item DTO mapped from IdentificationRecord.
#
# 🔗 Dependencies:
# - pydantic, domain models
#
# 🔄 Connected Modules / Calls From:
# - presentation/api/v1/identifications.py (response_model declarations)

"""
Identification API Schemas

Response Schemas:
- IdentificationResponse: Successful identification envelope
- IdentificationHistoryItem: One history entry
- IdentificationHistoryResponse: History list with count
- DeleteIdentificationResponse: Deletion confirmation
- ErrorResponse: Error envelope produced by the exception handlers
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ....domain.models.identification import (
    IdentificationRecord,
    IdentificationResult,
    IdentificationStatus,
    IdentifiedPlant,
)


class IdentificationResponse(BaseModel):
    success: bool = True
    message: str = Field("Plant identified successfully", examples=["Plant identified successfully"])
    data: IdentificationResult


class IdentificationHistoryItem(BaseModel):
    """One entry of a user's identification history."""

    identification_id: str
    original_image: str
    status: IdentificationStatus
    identified_plant: Optional[IdentifiedPlant] = None
    results: Optional[Dict[str, Any]] = None
    confidence: Optional[int] = Field(None, ge=0, le=100)
    primary_service: Optional[str] = None
    processing_time_ms: Optional[int] = None
    error: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, record: IdentificationRecord) -> "IdentificationHistoryItem":
        return cls(
            identification_id=record.identification_id,
            original_image=record.original_image,
            status=record.status,
            identified_plant=record.identified_plant,
            results=record.results,
            confidence=record.confidence,
            primary_service=record.primary_service,
            processing_time_ms=record.processing_time_ms,
            error=record.error,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class IdentificationHistoryResponse(BaseModel):
    success: bool = True
    data: List[IdentificationHistoryItem] = Field(default_factory=list)
    count: int = Field(..., ge=0)


class DeleteIdentificationResponse(BaseModel):
    success: bool = True
    message: str = "Identification deleted"


class ErrorResponse(BaseModel):
    """Error envelope; errors lists per-provider failures when every provider failed."""

    success: bool = False
    message: str
    error_code: Optional[str] = None
    errors: Optional[List[str]] = None
    details: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None
