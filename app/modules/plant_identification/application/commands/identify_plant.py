# 📄 File: app/modules/plant_identification/application/commands/identify_plant.py
# 🧭 Purpose (Layman Explanation):
# Holds everything a farmer or officer sends when asking "what plant is this?": the photo,
# which part of the plant it shows, the preferred language and an optional variety name.
#
# 🧪 Purpose (Technical Summary):
# CQRS command for one plant identification. from_form() turns raw multipart form values
# (organs as a JSON array string, manualSubtype) into a validated command.
#
# 🔗 Dependencies:
# - pydantic for command validation
# - app.shared.core.exceptions (ValidationError for malformed form values)
#
# 🔄 Connected Modules / Calls From:
# - application/handlers/command_handlers.py (IdentifyPlantCommandHandler)
# - presentation/api/v1/identifications.py (identify endpoint)

import json
from typing import List, Optional

from pydantic import BaseModel, Field

from app.shared.core.exceptions import ValidationError

from ...domain.models.identification import ALLOWED_ORGANS


def parse_organs(raw: Optional[str]) -> List[str]:
    """
    Parse the organs form value.

    Accepts a JSON array string ('["leaf", "flower"]') or a single bare tag.
    Empty input means "let the provider decide".
    """
    if raw is None or not raw.strip():
        return []

    text = raw.strip()
    if text.startswith("["):
        try:
            values = json.loads(text)
        except json.JSONDecodeError:
            raise ValidationError("organs must be a JSON array of strings", field="organs")
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ValidationError("organs must be a JSON array of strings", field="organs")
    else:
        values = [text]

    organs = [v.strip().lower() for v in values if v.strip()]
    invalid = [o for o in organs if o not in ALLOWED_ORGANS]
    if invalid:
        raise ValidationError(
            f"Unknown organ: {', '.join(invalid)}. Allowed: {', '.join(ALLOWED_ORGANS)}",
            field="organs",
            value=invalid,
        )
    return organs


class IdentifyPlantCommand(BaseModel):
    """Command for identifying the plant in one uploaded image."""

    user_id: str = Field(..., description="Subject of the authenticated token")
    image_data: Optional[bytes] = Field(None, description="Raw uploaded image bytes")
    filename: Optional[str] = None
    content_type: Optional[str] = None
    organs: List[str] = Field(default_factory=list, description="Photographed plant parts")
    language: Optional[str] = Field(None, description="Preferred language for common names")
    manual_subtype: Optional[str] = Field(None, description="User-supplied variety, passed through as sent")

    @classmethod
    def from_form(
        cls,
        user_id: str,
        image_data: Optional[bytes],
        filename: Optional[str],
        content_type: Optional[str],
        organs: Optional[str] = None,
        language: Optional[str] = None,
        manual_subtype: Optional[str] = None,
    ) -> "IdentifyPlantCommand":
        return cls(
            user_id=user_id,
            image_data=image_data,
            filename=filename,
            content_type=content_type,
            organs=parse_organs(organs),
            language=(language or "").strip() or None,
            manual_subtype=manual_subtype,
        )
