# 📄 File: app/modules/plant_identification/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Puts the identification machinery together for each request: which services to ask, where
# history is saved, and who is allowed to delete history entries.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency providers wiring explicit provider configuration (from Settings) into
# provider clients, the orchestrator, the SQLAlchemy repository and CQRS handlers. Tests
# override these via app.dependency_overrides.
# 🔗 Dependencies:
# FastAPI Depends, app.shared.config.settings, app.shared.core.dependencies,
# infrastructure clients/repository, application handlers
# 🔄 Connected Modules / Calls From:
# presentation/api/v1/identifications.py, app.api.v1.health (provider status), tests

"""
Plant Identification Module Dependencies

Provider credentials and timeouts are resolved once per request from the
cached Settings and handed to the orchestrator as ProviderConfig objects;
nothing below the presentation layer reads the environment.
"""

from typing import List, Optional

from fastapi import Depends

from app.shared.config.settings import Settings, get_settings
from app.shared.core.dependencies import CurrentUser, get_current_active_user, require_any_role
from app.shared.infrastructure.database.session import session_manager
from app.shared.infrastructure.storage.file_manager import FileManager, get_file_manager

from ..application.handlers.command_handlers import (
    DeleteIdentificationCommandHandler,
    IdentifyPlantCommandHandler,
)
from ..application.handlers.query_handlers import GetIdentificationHistoryQueryHandler
from ..domain.models.identification import ProviderConfig
from ..domain.repositories.identification_repository import IdentificationRepository
from ..domain.services.identification_orchestrator import IdentificationOrchestrator
from ..domain.services.identification_provider import IdentificationProvider
from ..infrastructure.database.identification_repository_impl import SQLAlchemyIdentificationRepository
from ..infrastructure.external import build_identification_providers

PROVIDER_DISPLAY_NAMES = {
    "plant_id": "Plant.id",
    "plantnet": "PlantNet",
}

# Roles allowed to delete history entries (admins always pass)
DELETE_ROLES = ["officer"]


def get_identification_config(settings: Optional[Settings] = None) -> List[ProviderConfig]:
    """
    Build the explicit provider configuration list, in fallback order.

    Args:
        settings: Settings to read; defaults to the cached application settings
    """
    settings = settings or get_settings()
    configs = [
        ProviderConfig(name=name, display_name=PROVIDER_DISPLAY_NAMES[name], **values)
        for name, values in settings.get_plant_api_config().items()
    ]
    return sorted(configs, key=lambda c: c.priority)


def get_identification_providers() -> List[IdentificationProvider]:
    return build_identification_providers(get_identification_config())


def get_identification_repository() -> IdentificationRepository:
    return SQLAlchemyIdentificationRepository(session_manager)


def get_identification_orchestrator(
    providers: List[IdentificationProvider] = Depends(get_identification_providers),
    repository: IdentificationRepository = Depends(get_identification_repository),
) -> IdentificationOrchestrator:
    return IdentificationOrchestrator(providers, repository)


def get_identify_handler(
    orchestrator: IdentificationOrchestrator = Depends(get_identification_orchestrator),
    file_manager: FileManager = Depends(get_file_manager),
) -> IdentifyPlantCommandHandler:
    return IdentifyPlantCommandHandler(
        orchestrator,
        file_manager,
        default_language=get_settings().IDENTIFICATION_DEFAULT_LANGUAGE,
    )


def get_history_handler(
    repository: IdentificationRepository = Depends(get_identification_repository),
) -> GetIdentificationHistoryQueryHandler:
    return GetIdentificationHistoryQueryHandler(repository)


def get_delete_handler(
    repository: IdentificationRepository = Depends(get_identification_repository),
) -> DeleteIdentificationCommandHandler:
    return DeleteIdentificationCommandHandler(repository)


# Authenticated caller for identify/history
get_identification_user = get_current_active_user

# Officer (or admin) caller for deletes
require_delete_permission = require_any_role(DELETE_ROLES)

__all__ = [
    "CurrentUser",
    "DELETE_ROLES",
    "PROVIDER_DISPLAY_NAMES",
    "get_delete_handler",
    "get_history_handler",
    "get_identification_config",
    "get_identification_orchestrator",
    "get_identification_providers",
    "get_identification_repository",
    "get_identification_user",
    "get_identify_handler",
    "require_delete_permission",
]
