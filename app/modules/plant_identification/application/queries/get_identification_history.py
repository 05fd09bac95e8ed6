# 📄 File: app/modules/plant_identification/application/queries/get_identification_history.py
# 🧭 Purpose (Layman Explanation):
# Asks for a user's most recent plant identifications.
#
# 🧪 Purpose (Technical Summary):
# CQRS query for a user's identification records, newest first, capped at MAX_HISTORY_LIMIT.
#
# 🔗 Dependencies:
# - pydantic
#
# 🔄 Connected Modules / Calls From:
# - application/handlers/query_handlers.py (GetIdentificationHistoryQueryHandler)
# - presentation/api/v1/identifications.py (history endpoint)

from pydantic import BaseModel, Field

MAX_HISTORY_LIMIT = 50


class GetIdentificationHistoryQuery(BaseModel):
    user_id: str = Field(..., min_length=1)
    limit: int = Field(MAX_HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT)
