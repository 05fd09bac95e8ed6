# 📄 File: app/modules/plant_identification/domain/services/__init__.py
# 🧭 Purpose (Layman Explanation):
# The business rules of plant identification: who to ask, in which order, and how to read the answers.
# 🧪 Purpose (Technical Summary):
# Re-exports the orchestrator, the provider interface and the response normalizer.
# 🔗 Dependencies:
# identification_orchestrator.py, identification_provider.py, response_normalizer.py
# 🔄 Connected Modules / Calls From:
# Application handlers, presentation dependencies, provider clients

from .identification_orchestrator import IN_MEMORY_IMAGE_REFERENCE, IdentificationOrchestrator
from .identification_provider import IdentificationProvider
from .response_normalizer import clamp_probability, normalize_response, to_confidence

__all__ = [
    "IN_MEMORY_IMAGE_REFERENCE",
    "IdentificationOrchestrator",
    "IdentificationProvider",
    "clamp_probability",
    "normalize_response",
    "to_confidence",
]
