# 📄 File: app/modules/plant_identification/infrastructure/external/plantnet_client.py
# 🧭 Purpose (Layman Explanation):
# Talks to the PlantNet service: uploads the photo as a file together with which part of the
# plant it shows (leaf, flower...) and reads back the matching species.
# 🧪 Purpose (Technical Summary):
# IdentificationProvider implementation for the PlantNet v2 identify API. Sends one multipart
# request (images + organs) to /{project} with api-key and lang query parameters, and
# validates the payload into PlantNetResponse.
# 🔗 Dependencies:
# app.shared.infrastructure.external_apis.api_client (aiohttp multipart), pydantic
# 🔄 Connected Modules / Calls From:
# infrastructure/external/__init__.py (provider factory), identification orchestrator

from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.exceptions import ExternalAPIError, ProviderCallFailedError
from app.shared.infrastructure.external_apis.api_client import APIClient
from app.shared.utils.logging import get_logger

from ...domain.models.identification import IdentificationRequest, ProviderConfig
from ...domain.models.provider_responses import PlantNetResponse, parse_provider_response
from ...domain.services.identification_provider import IdentificationProvider

logger = get_logger(__name__)

UPLOAD_FILENAME = "plant.jpg"


class PlantNetClient(IdentificationProvider):
    """PlantNet identification provider (multipart upload)."""

    def __init__(self, config: ProviderConfig, api_client: Optional[APIClient] = None):
        super().__init__(config)
        self.api_client = api_client or APIClient(
            base_url=config.api_url,
            api_name=config.display_name,
            api_key=config.api_key,
            timeout=config.timeout,
        )

    def select_organ(self, request: IdentificationRequest) -> str:
        """PlantNet expects one organ per image and we send one image."""
        organs = request.organs or self.config.default_organs or ["auto"]
        return organs[0]

    def build_params(self, request: IdentificationRequest) -> Dict[str, str]:
        return {
            "api-key": self.config.api_key or "",
            "lang": request.language or "en",
            "include-related-images": "false",
        }

    async def identify(self, request: IdentificationRequest) -> PlantNetResponse:
        organ = self.select_organ(request)
        logger.debug(f"Calling PlantNet ({self.config.project or 'all'}) with organ {organ}")

        try:
            payload = await self.api_client.upload_file(
                endpoint=self.config.project or "all",
                file_data=request.image,
                filename=UPLOAD_FILENAME,
                content_type=request.mime_type,
                field_name="images",
                additional_fields={"organs": [organ]},
                params=self.build_params(request),
                timeout=self.config.timeout,
            )
        except ExternalAPIError as e:
            raise ProviderCallFailedError(
                self.display_name, e.message, e.details.get("api_status_code")
            )

        try:
            return parse_provider_response(self.name, payload)
        except PydanticValidationError as e:
            logger.warning(f"Unreadable PlantNet payload: {e.error_count()} validation errors")
            raise ProviderCallFailedError(self.display_name, "Unexpected response format")
