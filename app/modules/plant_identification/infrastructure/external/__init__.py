# 📄 File: app/modules/plant_identification/infrastructure/external/__init__.py
# 🧭 Purpose (Layman Explanation):
# Builds the list of plant identification services we can ask, in the order we ask them.
# 🧪 Purpose (Technical Summary):
# Provider client exports plus a factory mapping ProviderConfig entries onto client classes,
# ordered by priority.
# 🔗 Dependencies:
# plant_id_client.py, plantnet_client.py, domain models
# 🔄 Connected Modules / Calls From:
# presentation/dependencies.py

from typing import Dict, List, Type

from ...domain.models.identification import ProviderConfig
from ...domain.services.identification_provider import IdentificationProvider
from .plant_id_client import PlantIdClient
from .plantnet_client import PlantNetClient

PROVIDER_CLIENTS: Dict[str, Type[IdentificationProvider]] = {
    "plant_id": PlantIdClient,
    "plantnet": PlantNetClient,
}


def build_identification_providers(configs: List[ProviderConfig]) -> List[IdentificationProvider]:
    """
    Instantiate one client per known provider config, in priority order.

    Unconfigured providers are still returned; the orchestrator skips them.
    """
    providers = []
    for config in sorted(configs, key=lambda c: c.priority):
        client_class = PROVIDER_CLIENTS.get(config.name)
        if client_class is None:
            raise ValueError(f"Unknown identification provider: {config.name}")
        providers.append(client_class(config))
    return providers


__all__ = [
    "PROVIDER_CLIENTS",
    "PlantIdClient",
    "PlantNetClient",
    "build_identification_providers",
]
