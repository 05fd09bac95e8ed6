# 📄 File: app/modules/plant_identification/application/handlers/query_handlers.py
# 🧭 Purpose (Layman Explanation):
# Fetches a user's identification history.
#
# 🧪 Purpose (Technical Summary):
# CQRS query handler reading IdentificationRecords through the repository interface.
#
# 🔗 Dependencies:
# - application queries, domain repository interface
#
# 🔄 Connected Modules / Calls From:
# - presentation/api/v1/identifications.py (history endpoint)

import logging
from typing import List

from ...domain.models.identification import IdentificationRecord
from ...domain.repositories.identification_repository import IdentificationRepository
from ..queries.get_identification_history import GetIdentificationHistoryQuery

logger = logging.getLogger(__name__)


class GetIdentificationHistoryQueryHandler:
    def __init__(self, repository: IdentificationRepository):
        self._repository = repository

    async def handle(self, query: GetIdentificationHistoryQuery) -> List[IdentificationRecord]:
        records = await self._repository.list_by_user(query.user_id, limit=query.limit)
        logger.debug(f"History for {query.user_id}: {len(records)} records")
        return records
