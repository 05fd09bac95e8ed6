# 📄 File: app/modules/plant_identification/presentation/api/v1/identifications.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints the nursery app calls to identify a plant from a photo, see past
# identifications, and remove an entry from that history.
#
# 🧪 Purpose (Technical Summary):
# FastAPI identification endpoints: multipart identify (rate limited with slowapi), caller
# history, and role-guarded delete. Errors propagate as NurseryException subclasses and are
# rendered by the shared exception handlers.
#
# 🔗 Dependencies:
# - FastAPI router, File/Form/Query parameters, slowapi limiter
# - application commands/queries and handlers
# - presentation dependencies and schemas
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /api/v1/identifications)
# - Nursery mobile app and officer dashboard

"""
Identification API Endpoints

Endpoints:
- POST /identify: Identify the plant in an uploaded image
- GET /history: Caller's identification history (newest first, max 50)
- DELETE /{identification_id}: Delete one of the caller's records (officer/admin)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status

from app.shared.core.dependencies import CurrentUser
from app.shared.core.rate_limiter import identify_rate_limit, limiter

from ....application.commands.delete_identification import DeleteIdentificationCommand
from ....application.commands.identify_plant import IdentifyPlantCommand
from ....application.handlers.command_handlers import (
    DeleteIdentificationCommandHandler,
    IdentifyPlantCommandHandler,
)
from ....application.handlers.query_handlers import GetIdentificationHistoryQueryHandler
from ....application.queries.get_identification_history import (
    MAX_HISTORY_LIMIT,
    GetIdentificationHistoryQuery,
)
from ...dependencies import (
    get_delete_handler,
    get_history_handler,
    get_identification_user,
    get_identify_handler,
    require_delete_permission,
)
from ..schemas.identification_schemas import (
    DeleteIdentificationResponse,
    ErrorResponse,
    IdentificationHistoryItem,
    IdentificationHistoryResponse,
    IdentificationResponse,
)

logger = logging.getLogger(__name__)

identification_router = APIRouter()


@identification_router.post(
    "/identify",
    response_model=IdentificationResponse,
    summary="Identify a plant",
    description="Identify the plant in an uploaded image using the configured identification services",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid image"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        413: {"model": ErrorResponse, "description": "Image too large"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "All identification services failed"},
    }
)
@limiter.limit(identify_rate_limit)
async def identify_plant(
    request: Request,
    image: Optional[UploadFile] = File(None, description="Plant photo (jpeg, png or webp)"),
    organs: Optional[str] = Form(None, description='JSON array of organs, e.g. ["leaf"]'),
    language: Optional[str] = Form(None, description="Preferred language for common names"),
    manual_subtype: Optional[str] = Form(None, alias="manualSubtype"),
    current_user: CurrentUser = Depends(get_identification_user),
    handler: IdentifyPlantCommandHandler = Depends(get_identify_handler),
) -> IdentificationResponse:
    image_data = await image.read() if image is not None else None

    command = IdentifyPlantCommand.from_form(
        user_id=current_user.user_id,
        image_data=image_data,
        filename=image.filename if image is not None else None,
        content_type=image.content_type if image is not None else None,
        organs=organs,
        language=language,
        manual_subtype=manual_subtype,
    )
    result = await handler.handle(command)

    return IdentificationResponse(
        message="Plant identified successfully",
        data=result,
    )


@identification_router.get(
    "/history",
    response_model=IdentificationHistoryResponse,
    summary="Get identification history",
    description="Get the caller's most recent identifications, newest first",
    responses={
        401: {"model": ErrorResponse, "description": "Authentication required"},
    }
)
async def get_identification_history(
    limit: int = Query(MAX_HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT, description="Maximum records"),
    current_user: CurrentUser = Depends(get_identification_user),
    handler: GetIdentificationHistoryQueryHandler = Depends(get_history_handler),
) -> IdentificationHistoryResponse:
    records = await handler.handle(
        GetIdentificationHistoryQuery(user_id=current_user.user_id, limit=limit)
    )
    items = [IdentificationHistoryItem.from_domain(r) for r in records]
    return IdentificationHistoryResponse(data=items, count=len(items))


@identification_router.delete(
    "/{identification_id}",
    response_model=DeleteIdentificationResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an identification",
    description="Delete one of the caller's identification records",
    responses={
        401: {"model": ErrorResponse, "description": "Authentication required"},
        403: {"model": ErrorResponse, "description": "Officer role required"},
        404: {"model": ErrorResponse, "description": "Identification not found"},
    }
)
async def delete_identification(
    identification_id: str,
    current_user: CurrentUser = Depends(require_delete_permission),
    handler: DeleteIdentificationCommandHandler = Depends(get_delete_handler),
) -> DeleteIdentificationResponse:
    await handler.handle(
        DeleteIdentificationCommand(
            identification_id=identification_id,
            user_id=current_user.user_id,
        )
    )
    return DeleteIdentificationResponse(message="Identification deleted")
