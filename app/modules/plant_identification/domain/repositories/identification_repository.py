# 📄 File: app/modules/plant_identification/domain/repositories/identification_repository.py
# 🧭 Purpose (Layman Explanation):
# Defines the contract for saving, listing and removing a user's plant identification history.
# 🧪 Purpose (Technical Summary):
# Repository interface for IdentificationRecord persistence following the Repository pattern.
# Concrete implementations live in the infrastructure layer.
# 🔗 Dependencies:
# Domain models (IdentificationRecord), typing, abc
# 🔄 Connected Modules / Calls From:
# identification_orchestrator.py, application handlers, infrastructure implementation

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.identification import IdentificationRecord


class IdentificationRepository(ABC):
    """
    Repository interface for IdentificationRecord data access.

    Implementation Notes:
    - Methods return domain entities, not database models
    - All operations are async for non-blocking I/O
    - Failures raise RepositoryError/DatabaseError; callers decide whether
      they are fatal (history, delete) or only logged (identification)
    """

    @abstractmethod
    async def create(self, record: IdentificationRecord) -> IdentificationRecord:
        """
        Persist a new record, normally in pending state.

        Returns:
            The stored record
        """
        pass

    @abstractmethod
    async def update(self, record: IdentificationRecord) -> IdentificationRecord:
        """
        Persist the final state of an existing record.

        Raises:
            NotFoundError: If the record no longer exists
        """
        pass

    @abstractmethod
    async def get_by_id(self, identification_id: str) -> Optional[IdentificationRecord]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str, limit: int = 50) -> List[IdentificationRecord]:
        """
        Get a user's records, newest first.

        Args:
            user_id: Owner of the records
            limit: Maximum number of records to return
        """
        pass

    @abstractmethod
    async def delete_for_user(self, identification_id: str, user_id: str) -> bool:
        """
        Delete one record owned by ``user_id``.

        Returns:
            True if a record was deleted, False if none matched
        """
        pass
