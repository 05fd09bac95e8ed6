# 📄 File: app/modules/plant_identification/domain/models/identification.py
# 🧭 Purpose (Layman Explanation):
# Describes what an identification request looks like, what a single "this might be a Rose" guess
# looks like, the final answer we hand back, and the history entry we save for each user.
# 🧪 Purpose (Technical Summary):
# Pydantic domain models for the identification flow: ProviderConfig, IdentificationRequest,
# ProviderSuggestion with SuggestionDetails/CareInfo, IdentificationResult, and the persisted
# IdentificationRecord with its pending -> completed | failed lifecycle.
# 🔗 Dependencies:
# pydantic, datetime, typing, uuid, enum
# 🔄 Connected Modules / Calls From:
# response_normalizer.py, identification_orchestrator.py, identification_repository.py,
# provider clients, command handlers, API schemas

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


ALLOWED_ORGANS = ("leaf", "flower", "fruit", "bark", "auto")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdentificationStatus(str, Enum):
    """Lifecycle states of an identification record"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class ProviderConfig(BaseModel):
    """
    Explicit configuration for one identification provider.

    Handed to the orchestrator at construction time; nothing reads the
    process environment during an identification call.
    """
    name: str                       # stable tag, e.g. "plant_id"
    display_name: str               # shown in results and error strings, e.g. "Plant.id"
    api_key: Optional[str] = None
    api_url: str
    timeout: float = 30
    priority: int = 1               # lower runs first
    project: Optional[str] = None   # PlantNet flora project
    default_organs: List[str] = Field(default_factory=list)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class IdentificationRequest(BaseModel):
    """Transient input for one identification. Never persisted itself."""
    image: bytes
    mime_type: str = "image/jpeg"
    organs: List[str] = Field(default_factory=list)
    manual_subtype: Optional[str] = None
    language: Optional[str] = None
    requester_id: Optional[str] = None
    image_reference: Optional[str] = None

    @field_validator("organs")
    @classmethod
    def validate_organs(cls, v: List[str]) -> List[str]:
        cleaned = [o.strip().lower() for o in v if o and o.strip()]
        invalid = [o for o in cleaned if o not in ALLOWED_ORGANS]
        if invalid:
            raise ValueError(f"Unknown organ tags: {invalid}. Allowed: {list(ALLOWED_ORGANS)}")
        return cleaned

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip().lower()


class CareInfo(BaseModel):
    """Basic care hints; every field falls back to "Unknown"."""
    light: str = "Unknown"
    water: str = "Unknown"
    soil: str = "Unknown"


class SuggestionDetails(BaseModel):
    """Provider-dependent detail bag with empty defaults instead of nulls."""
    common_names: Dict[str, List[str]] = Field(default_factory=dict)
    taxonomy: Dict[str, str] = Field(default_factory=dict)
    description: str = ""
    url: str = ""
    care_info: CareInfo = Field(default_factory=CareInfo)
    uses: List[str] = Field(default_factory=list)
    toxicity: str = "Unknown"
    edible_parts: List[str] = Field(default_factory=list)


class ProviderSuggestion(BaseModel):
    """
    One candidate match, normalized.

    rank is the 1-based position in the provider's own ordering and is
    never recomputed.
    """
    rank: int = Field(..., ge=1)
    scientific_name: str
    common_name: str
    confidence: int = Field(..., ge=0, le=100)
    probability: float = Field(..., ge=0.0, le=1.0)
    details: SuggestionDetails = Field(default_factory=SuggestionDetails)
    source: str


class IdentificationResult(BaseModel):
    """Final normalized output of one successful identification."""
    identification_id: Optional[str] = None
    primary_service: str
    fallback_used: bool = False
    overall_confidence: int = Field(..., ge=0, le=100)
    best_match: ProviderSuggestion
    suggestions: List[ProviderSuggestion] = Field(..., min_length=1)
    total_results: int
    duration_ms: int = 0
    processed_at: datetime = Field(default_factory=_utcnow)


class IdentifiedPlant(BaseModel):
    """Summary of the winning suggestion stored on a completed record."""
    scientific_name: str
    common_name: str
    probability: int = Field(..., ge=0, le=100)
    subtype: Optional[str] = None
    translated_name: Dict[str, str] = Field(default_factory=dict)


class IdentificationRecord(BaseModel):
    """
    Persisted identification history entry.

    Created pending before any provider call, then moved to completed or
    failed exactly once.
    """
    identification_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    original_image: str
    status: IdentificationStatus = IdentificationStatus.PENDING
    identified_plant: Optional[IdentifiedPlant] = None
    results: Optional[Dict[str, Any]] = None
    confidence: Optional[int] = None
    primary_service: Optional[str] = None
    processing_time_ms: Optional[int] = None
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_final(self) -> bool:
        return self.status != IdentificationStatus.PENDING

    def _ensure_pending(self) -> None:
        if self.is_final:
            raise ValueError(
                f"Identification {self.identification_id} is already {self.status.value}"
            )

    def mark_completed(
        self,
        result: IdentificationResult,
        identified_plant: IdentifiedPlant,
        processing_time_ms: int
    ) -> None:
        self._ensure_pending()
        self.status = IdentificationStatus.COMPLETED
        self.identified_plant = identified_plant
        self.results = result.model_dump(mode="json")
        self.confidence = result.overall_confidence
        self.primary_service = result.primary_service
        self.processing_time_ms = processing_time_ms
        self.updated_at = _utcnow()

    def mark_failed(self, error: str, processing_time_ms: int) -> None:
        self._ensure_pending()
        self.status = IdentificationStatus.FAILED
        self.error = error
        self.processing_time_ms = processing_time_ms
        self.updated_at = _utcnow()
