"""
Rate limiting for the Nursery Identification API.
Per-caller limits on the identify endpoint using slowapi (in-memory storage).
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from ..config.settings import get_settings

logger = logging.getLogger(__name__)


def rate_limit_key(request: Request) -> str:
    """
    Key requests by authenticated user, falling back to client address.

    The user id is set on request.state by get_current_user, which runs
    before the limit is checked.
    """
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


def identify_rate_limit() -> str:
    """Current identify limit, e.g. '30/minute'."""
    return get_settings().IDENTIFY_RATE_LIMIT


limiter = Limiter(key_func=rate_limit_key)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render slowapi's RateLimitExceeded in the standard error envelope."""
    request_id = getattr(request.state, "request_id", None)
    logger.warning(f"Rate limit exceeded for {rate_limit_key(request)} on {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": "Too many requests, please try again later",
            "error_code": "RATE_LIMIT_EXCEEDED",
            "details": {"limit": str(exc.detail)},
            "request_id": request_id,
        },
    )
