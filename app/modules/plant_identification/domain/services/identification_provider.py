# 📄 File: app/modules/plant_identification/domain/services/identification_provider.py
# 🧭 Purpose (Layman Explanation):
# The common "plug shape" every plant identification service has to fit, so the app can try
# one service and then another without caring how each one works inside.
# 🧪 Purpose (Technical Summary):
# Abstract provider interface consumed by the orchestrator. Implementations send one request
# per call and return a validated provider payload variant, raising ProviderCallFailedError
# (or any ExternalAPIError) on failure.
# 🔗 Dependencies:
# abc, domain models
# 🔄 Connected Modules / Calls From:
# identification_orchestrator.py, infrastructure/external provider clients, test fakes

from abc import ABC, abstractmethod
from typing import Union

from ..models.identification import IdentificationRequest, ProviderConfig
from ..models.provider_responses import PlantIdResponse, PlantNetResponse


class IdentificationProvider(ABC):
    """
    Interface for an external plant identification provider.
    """

    def __init__(self, config: ProviderConfig):
        self.config = config

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    @abstractmethod
    async def identify(
        self,
        request: IdentificationRequest
    ) -> Union[PlantIdResponse, PlantNetResponse]:
        """
        Send one identification request to the provider.

        Args:
            request: Image and hints to identify

        Returns:
            Validated raw payload variant for this provider

        Raises:
            ProviderCallFailedError: On timeout, transport error, non-2xx
                status or an unreadable payload
        """
        pass
