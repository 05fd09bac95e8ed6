# 📄 File: app/modules/plant_identification/infrastructure/external/plant_id_client.py
# 🧭 Purpose (Layman Explanation):
# Talks to the Plant.id service: sends the photo as text inside a JSON message and reads back
# its list of likely plants.
# 🧪 Purpose (Technical Summary):
# IdentificationProvider implementation for the Plant.id v3 identification API. Builds a
# base64 data-URI JSON body with requested detail fields and language, posts once with the
# configured timeout through APIClient, and validates the payload into PlantIdResponse.
# 🔗 Dependencies:
# app.shared.infrastructure.external_apis.api_client (aiohttp), pydantic, base64
# 🔄 Connected Modules / Calls From:
# infrastructure/external/__init__.py (provider factory), identification orchestrator

import base64
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.exceptions import ExternalAPIError, ProviderCallFailedError
from app.shared.infrastructure.external_apis.api_client import APIClient
from app.shared.utils.logging import get_logger

from ...domain.models.identification import IdentificationRequest, ProviderConfig
from ...domain.models.provider_responses import PlantIdResponse, parse_provider_response
from ...domain.services.identification_provider import IdentificationProvider

logger = get_logger(__name__)

# Detail fields requested for every suggestion
PLANT_DETAILS = [
    "common_names",
    "url",
    "description",
    "taxonomy",
    "watering",
    "best_light_condition",
    "best_soil_type",
    "common_uses",
    "toxicity",
    "edible_parts",
]


class PlantIdClient(IdentificationProvider):
    """Plant.id identification provider (JSON body, base64 image)."""

    def __init__(self, config: ProviderConfig, api_client: Optional[APIClient] = None):
        super().__init__(config)
        self.api_client = api_client or APIClient(
            base_url=config.api_url,
            api_name=config.display_name,
            api_key=config.api_key,
            timeout=config.timeout,
        )

    def build_payload(self, request: IdentificationRequest) -> Dict[str, Any]:
        encoded = base64.b64encode(request.image).decode("ascii")
        return {
            "images": [f"data:{request.mime_type};base64,{encoded}"],
            "similar_images": True,
        }

    def build_params(self, request: IdentificationRequest) -> Dict[str, str]:
        return {
            "details": ",".join(PLANT_DETAILS),
            "language": request.language or "en",
        }

    async def identify(self, request: IdentificationRequest) -> PlantIdResponse:
        logger.debug(f"Calling Plant.id with {len(request.image)} image bytes")

        try:
            payload = await self.api_client.post(
                json_body=self.build_payload(request),
                params=self.build_params(request),
                headers={"Api-Key": self.config.api_key or ""},
                timeout=self.config.timeout,
            )
        except ExternalAPIError as e:
            raise ProviderCallFailedError(
                self.display_name, e.message, e.details.get("api_status_code")
            )

        try:
            return parse_provider_response(self.name, payload)
        except PydanticValidationError as e:
            logger.warning(f"Unreadable Plant.id payload: {e.error_count()} validation errors")
            raise ProviderCallFailedError(self.display_name, "Unexpected response format")
