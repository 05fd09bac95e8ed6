# 📄 File: app/modules/plant_identification/infrastructure/database/identification_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Saves, updates, lists and deletes identification history entries in the database.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy implementation of IdentificationRepository. Opens one transactional session per
# call through the shared DatabaseSessionManager so an identification never depends on a
# request-scoped session, and maps between domain records and PlantIdentificationModel rows.
#
# 🔗 Dependencies:
# - SQLAlchemy async select/delete
# - app.shared.infrastructure.database.session (DatabaseSessionManager)
# - Domain IdentificationRepository interface and IdentificationRecord model
#
# 🔄 Connected Modules / Calls From:
# - presentation/dependencies.py (repository wiring)
# - identification orchestrator, history/delete handlers

"""
Identification Repository Implementation

Each public method owns its unit of work: the session manager commits on a
clean exit and rolls back otherwise. SQLAlchemy failures surface as
DatabaseError from the session manager or RepositoryError from here.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from app.shared.core.exceptions import NotFoundError, RepositoryError
from app.shared.infrastructure.database.session import DatabaseSessionManager, session_manager

from ...domain.models.identification import (
    IdentificationRecord,
    IdentificationStatus,
    IdentifiedPlant,
)
from ...domain.repositories.identification_repository import IdentificationRepository
from .models import PlantIdentificationModel

logger = logging.getLogger(__name__)


def _as_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class SQLAlchemyIdentificationRepository(IdentificationRepository):
    """
    SQLAlchemy implementation of the IdentificationRepository interface.
    """

    def __init__(self, manager: Optional[DatabaseSessionManager] = None):
        self._sessions = manager or session_manager

    async def create(self, record: IdentificationRecord) -> IdentificationRecord:
        try:
            async with self._sessions.get_session() as session:
                model = self._domain_to_model(record)
                session.add(model)
                await session.flush()
                logger.info(f"Created identification record {model.identification_id}")
                return self._model_to_domain(model)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to create identification: {e}", "create", "identification")

    async def update(self, record: IdentificationRecord) -> IdentificationRecord:
        record_id = _as_uuid(record.identification_id)
        try:
            async with self._sessions.get_session() as session:
                model = await session.get(PlantIdentificationModel, record_id) if record_id else None
                if model is None:
                    raise NotFoundError(
                        "Identification not found",
                        resource_type="identification",
                        resource_id=record.identification_id,
                    )

                model.status = record.status.value
                model.identified_plant = (
                    record.identified_plant.model_dump(mode="json") if record.identified_plant else None
                )
                model.results = record.results
                model.confidence = record.confidence
                model.primary_service = record.primary_service
                model.processing_time_ms = record.processing_time_ms
                model.error = record.error
                model.updated_at = record.updated_at

                await session.flush()
                logger.debug(f"Updated identification {record.identification_id} -> {model.status}")
                return self._model_to_domain(model)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to update identification: {e}", "update", "identification")

    async def get_by_id(self, identification_id: str) -> Optional[IdentificationRecord]:
        record_id = _as_uuid(identification_id)
        if record_id is None:
            return None

        try:
            async with self._sessions.get_session() as session:
                model = await session.get(PlantIdentificationModel, record_id)
                return self._model_to_domain(model) if model else None
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to retrieve identification: {e}", "get_by_id", "identification")

    async def list_by_user(self, user_id: str, limit: int = 50) -> List[IdentificationRecord]:
        try:
            async with self._sessions.get_session() as session:
                stmt = (
                    select(PlantIdentificationModel)
                    .where(PlantIdentificationModel.user_id == user_id)
                    .order_by(PlantIdentificationModel.created_at.desc())
                    .limit(limit)
                )
                result = await session.execute(stmt)
                records = [self._model_to_domain(m) for m in result.scalars().all()]
                logger.debug(f"Retrieved {len(records)} identifications for user {user_id}")
                return records
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to list identifications: {e}", "list_by_user", "identification")

    async def delete_for_user(self, identification_id: str, user_id: str) -> bool:
        record_id = _as_uuid(identification_id)
        if record_id is None:
            return False

        try:
            async with self._sessions.get_session() as session:
                stmt = delete(PlantIdentificationModel).where(
                    PlantIdentificationModel.identification_id == record_id,
                    PlantIdentificationModel.user_id == user_id,
                )
                result = await session.execute(stmt)
                deleted = result.rowcount > 0
                if deleted:
                    logger.info(f"Deleted identification {identification_id} for user {user_id}")
                return deleted
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to delete identification: {e}", "delete", "identification")

    # =========================================================================
    # MAPPING
    # =========================================================================

    def _domain_to_model(self, record: IdentificationRecord) -> PlantIdentificationModel:
        return PlantIdentificationModel(
            identification_id=_as_uuid(record.identification_id),
            user_id=record.user_id,
            original_image=record.original_image,
            status=record.status.value,
            identified_plant=(
                record.identified_plant.model_dump(mode="json") if record.identified_plant else None
            ),
            results=record.results,
            confidence=record.confidence,
            primary_service=record.primary_service,
            processing_time_ms=record.processing_time_ms,
            error=record.error,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def _model_to_domain(self, model: PlantIdentificationModel) -> IdentificationRecord:
        return IdentificationRecord(
            identification_id=str(model.identification_id),
            user_id=model.user_id,
            original_image=model.original_image,
            status=IdentificationStatus(model.status),
            identified_plant=(
                IdentifiedPlant.model_validate(model.identified_plant) if model.identified_plant else None
            ),
            results=model.results,
            confidence=model.confidence,
            primary_service=model.primary_service,
            processing_time_ms=model.processing_time_ms,
            error=model.error,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
