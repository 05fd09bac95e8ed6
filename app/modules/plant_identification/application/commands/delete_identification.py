# 📄 File: app/modules/plant_identification/application/commands/delete_identification.py
# 🧭 Purpose (Layman Explanation):
# The request to remove one entry from a user's identification history.
#
# 🧪 Purpose (Technical Summary):
# CQRS command carrying the record id and the owner it must belong to.
#
# 🔗 Dependencies:
# - pydantic
#
# 🔄 Connected Modules / Calls From:
# - application/handlers/command_handlers.py (DeleteIdentificationCommandHandler)
# - presentation/api/v1/identifications.py (delete endpoint)

from pydantic import BaseModel, Field


class DeleteIdentificationCommand(BaseModel):
    identification_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
