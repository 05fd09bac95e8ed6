# 📄 File: app/modules/plant_identification/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# Carries out identification requests: checks and shrinks the photo, keeps a copy, asks the
# identification services, and removes history entries on request.
#
# 🧪 Purpose (Technical Summary):
# CQRS command handlers. IdentifyPlantCommandHandler runs upload validation, Pillow
# preprocessing and best-effort local storage before delegating to IdentificationOrchestrator.
# DeleteIdentificationCommandHandler removes one record owned by the caller.
#
# 🔗 Dependencies:
# - application commands, domain orchestrator and repository interface
# - app.shared.infrastructure.storage.file_manager (validation, resize, storage)
#
# 🔄 Connected Modules / Calls From:
# - presentation/dependencies.py (handler wiring)
# - presentation/api/v1/identifications.py (identify and delete endpoints)

__all__ = [
    "IdentifyPlantCommandHandler",
    "DeleteIdentificationCommandHandler",
]

import logging
from typing import Optional

from app.shared.core.exceptions import FileStorageError, NotFoundError
from app.shared.infrastructure.storage.file_manager import FileManager

from ...domain.models.identification import IdentificationRequest, IdentificationResult
from ...domain.repositories.identification_repository import IdentificationRepository
from ...domain.services.identification_orchestrator import (
    IN_MEMORY_IMAGE_REFERENCE,
    IdentificationOrchestrator,
)
from ..commands.delete_identification import DeleteIdentificationCommand
from ..commands.identify_plant import IdentifyPlantCommand

logger = logging.getLogger(__name__)


class IdentifyPlantCommandHandler:
    """
    Handles one identification: validate, preprocess, store, identify.
    """

    def __init__(
        self,
        orchestrator: IdentificationOrchestrator,
        file_manager: FileManager,
        default_language: Optional[str] = None,
    ):
        self._orchestrator = orchestrator
        self._file_manager = file_manager
        self._default_language = default_language

    async def handle(self, command: IdentifyPlantCommand) -> IdentificationResult:
        # Rejects a missing image before any provider is contacted
        self._file_manager.validate_upload(command.image_data, command.filename, command.content_type)

        processed = await self._file_manager.process_image(command.image_data, command.content_type)
        logger.info(
            f"Image preprocessed for {command.user_id}: "
            f"{processed['original_size_bytes']} -> {processed['size_bytes']} bytes "
            f"({processed['width']}x{processed['height']})"
        )

        image_reference = await self._store_image(processed["data"])

        request = IdentificationRequest(
            image=processed["data"],
            mime_type=processed["mime_type"],
            organs=command.organs,
            manual_subtype=command.manual_subtype,
            language=command.language or self._default_language,
            requester_id=command.user_id,
            image_reference=image_reference,
        )
        return await self._orchestrator.identify(request)

    async def _store_image(self, data: bytes) -> str:
        try:
            return await self._file_manager.store_image(data)
        except FileStorageError as e:
            logger.warning(f"Image not stored, recording in-memory reference: {e.message}")
            return IN_MEMORY_IMAGE_REFERENCE


class DeleteIdentificationCommandHandler:
    """
    Deletes one identification record owned by the caller.
    """

    def __init__(self, repository: IdentificationRepository):
        self._repository = repository

    async def handle(self, command: DeleteIdentificationCommand) -> None:
        deleted = await self._repository.delete_for_user(command.identification_id, command.user_id)
        if not deleted:
            raise NotFoundError(
                "Identification not found",
                resource_type="identification",
                resource_id=command.identification_id,
            )
        logger.info(f"Identification {command.identification_id} deleted by {command.user_id}")
