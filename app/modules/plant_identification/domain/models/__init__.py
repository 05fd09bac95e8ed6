# 📄 File: app/modules/plant_identification/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# Collects the shapes used for plant identification requests, answers and history entries.
# 🧪 Purpose (Technical Summary):
# Re-exports domain models and raw provider payload variants.
# 🔗 Dependencies:
# identification.py, provider_responses.py
# 🔄 Connected Modules / Calls From:
# Domain services, repositories, application handlers, provider clients

from .identification import (
    ALLOWED_ORGANS,
    CareInfo,
    IdentificationRecord,
    IdentificationRequest,
    IdentificationResult,
    IdentificationStatus,
    IdentifiedPlant,
    ProviderConfig,
    ProviderSuggestion,
    SuggestionDetails,
)
from .provider_responses import (
    PlantIdResponse,
    PlantNetResponse,
    ProviderResponse,
    parse_provider_response,
)

__all__ = [
    "ALLOWED_ORGANS",
    "CareInfo",
    "IdentificationRecord",
    "IdentificationRequest",
    "IdentificationResult",
    "IdentificationStatus",
    "IdentifiedPlant",
    "ProviderConfig",
    "ProviderSuggestion",
    "SuggestionDetails",
    "PlantIdResponse",
    "PlantNetResponse",
    "ProviderResponse",
    "parse_provider_response",
]
