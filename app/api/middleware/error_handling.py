# 📄 File: app/api/middleware/error_handling.py
# 🧭 Purpose (Layman Explanation):
# Turns every problem (bad upload, expired login, all identification services down...) into a
# clear, consistent error message for the app, without ever leaking secrets or internals.
# 🧪 Purpose (Technical Summary):
# FastAPI exception handlers rendering NurseryException, request validation errors, HTTP
# errors, slowapi RateLimitExceeded and unhandled exceptions into the
# {success: false, message, error_code, errors?, request_id} envelope.
# 🔗 Dependencies:
# FastAPI, Starlette, slowapi, app.shared.core.exceptions, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main (register_exception_handlers), all API endpoints

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.shared.config.settings import get_settings
from app.shared.core.exceptions import (
    DatabaseError,
    FileStorageError,
    NurseryException,
    RepositoryError,
    TransactionError,
    is_server_error,
)
from app.shared.core.rate_limiter import rate_limit_exceeded_handler
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

# Messages of these errors can carry driver or filesystem internals
INTERNAL_ERRORS = (DatabaseError, RepositoryError, TransactionError, FileStorageError)

HTTP_ERROR_CODES = {
    401: "AUTHENTICATION_ERROR",
    403: "AUTHORIZATION_ERROR",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """
    Create a standardized error response.

    Args:
        error_code: Error code identifier
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        request_id: Request correlation ID
        extra: Additional top-level envelope fields (e.g. errors)
    """
    content: Dict[str, Any] = {
        "success": False,
        "message": message,
        "error_code": error_code,
    }
    if details:
        content["details"] = details
    if extra:
        content.update(extra)
    content["request_id"] = request_id

    response = JSONResponse(status_code=status_code, content=content)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    response.headers["X-Error-Code"] = error_code
    return response


async def nursery_exception_handler(request: Request, exc: NurseryException) -> JSONResponse:
    """Handle application exceptions."""
    payload = exc.to_dict()
    message = payload.pop("message")
    error_code = payload.pop("error_code")
    details = payload.pop("details", None)
    payload.pop("success", None)

    if is_server_error(exc):
        logger.error(f"❌ {error_code} on {request.method} {request.url.path}: {exc.message}")
        if isinstance(exc, INTERNAL_ERRORS) and not get_settings().DEBUG:
            message = "An internal server error occurred"
            details = None
    else:
        logger.info(f"{error_code} on {request.method} {request.url.path}: {exc.message}")

    return create_error_response(
        error_code=error_code,
        message=message,
        status_code=exc.status_code,
        details=details,
        request_id=_request_id(request),
        extra=payload,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle FastAPI request validation errors."""
    validation_errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    return create_error_response(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        status_code=422,
        details={"validation_errors": validation_errors},
        request_id=_request_id(request),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP errors raised by routing or FastAPI security helpers."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = create_error_response(
        error_code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        message=message,
        status_code=exc.status_code,
        request_id=_request_id(request),
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle anything else as a generic 500 with no internals."""
    logger.error(
        f"❌ Internal server error on {request.method} {request.url.path}: {type(exc).__name__}",
        exc_info=True,
    )
    details = {"error_type": type(exc).__name__} if get_settings().DEBUG else None
    return create_error_response(
        error_code="INTERNAL_SERVER_ERROR",
        message="An internal server error occurred",
        status_code=500,
        details=details,
        request_id=_request_id(request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all error envelope handlers to the application."""
    app.add_exception_handler(NurseryException, nursery_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
