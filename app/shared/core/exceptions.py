# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# Names every way a plant identification request can go wrong (no photo, bad token, both
# identification services down, database trouble...) so the app always gets a clear answer.
# 🧪 Purpose (Technical Summary):
# Exception hierarchy rooted at NurseryException. Each subclass fixes its HTTP status and
# error_code and carries structured details; to_dict() renders the API error envelope used
# by the exception handlers.
# 🔗 Dependencies:
# FastAPI HTTPException and status constants, typing
# 🔄 Connected Modules / Calls From:
# api/middleware/error_handling.py, identification orchestrator, provider clients,
# repositories, file manager, security and auth dependencies

from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status


def _collect(details: Optional[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    """Merge the non-empty keyword fields into a copy of ``details``."""
    merged = dict(details or {})
    merged.update({key: value for key, value in fields.items() if value is not None and value != ""})
    return merged


class NurseryException(Exception):
    """
    Base exception class for the nursery identification service.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the API error envelope."""
        payload = {
            "success": False,
            "message": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            payload["details"] = self.details
        return payload


# =============================================================================
# AUTHENTICATION & AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthenticationError(NurseryException):
    """Bearer token missing, malformed, expired or without a subject."""

    def __init__(self, message: str = "Authentication required", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details, "AUTHENTICATION_ERROR")


class AuthorizationError(NurseryException):
    """Authenticated caller lacks the role needed for an action."""

    def __init__(
        self,
        message: str = "Access denied",
        required_permission: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_403_FORBIDDEN,
            _collect(details, required_permission=required_permission, user_id=user_id),
            "AUTHORIZATION_ERROR",
        )


# =============================================================================
# VALIDATION & LOOKUP EXCEPTIONS
# =============================================================================

class ValidationError(NurseryException):
    """
    Request values the service cannot act on, e.g. an unknown organ tag.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_400_BAD_REQUEST,
            _collect(
                details,
                field=field,
                value=str(value) if value is not None else None,
                constraint=constraint,
            ),
            "VALIDATION_ERROR",
        )


class NotFoundError(NurseryException):
    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_404_NOT_FOUND,
            _collect(details, resource_type=resource_type, resource_id=resource_id),
            "NOT_FOUND",
        )


# =============================================================================
# IMAGE UPLOAD EXCEPTIONS
# =============================================================================

class MissingImageError(NurseryException):
    """
    Identification request without an image.
    Rejected before any provider is contacted.
    """

    def __init__(self, message: str = "Please upload an image"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, error_code="MISSING_IMAGE")


class FileTooLargeError(NurseryException):
    def __init__(
        self,
        message: str = "Uploaded file is too large",
        max_size_mb: Optional[float] = None,
        actual_size_mb: Optional[float] = None,
        filename: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            _collect(details, max_size_mb=max_size_mb, actual_size_mb=actual_size_mb, filename=filename),
            "FILE_TOO_LARGE",
        )


class InvalidFileTypeError(NurseryException):
    """
    Upload is not an accepted image type, or its bytes do not decode
    as an image.
    """

    def __init__(
        self,
        message: str = "Invalid or unsupported file type",
        filename: Optional[str] = None,
        expected_types: Optional[list] = None,
        actual_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_400_BAD_REQUEST,
            _collect(details, filename=filename, expected_types=expected_types or None, actual_type=actual_type),
            "INVALID_FILE_TYPE",
        )


class FileStorageError(NurseryException):
    """Processed image could not be written to the upload directory."""

    def __init__(
        self,
        message: str = "File storage error",
        operation: Optional[str] = None,
        filename: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _collect(details, operation=operation, filename=filename),
            "FILE_STORAGE_ERROR",
        )


# =============================================================================
# IDENTIFICATION PROVIDER EXCEPTIONS
# =============================================================================

class ExternalAPIError(NurseryException):
    """
    Outbound HTTP call to Plant.id or PlantNet failed: non-2xx status,
    transport error or a body that is not a JSON object.
    """

    def __init__(
        self,
        message: str = "External API error",
        api_name: Optional[str] = None,
        api_status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_502_BAD_GATEWAY,
            _collect(details, api_name=api_name, api_status_code=api_status_code or None),
            "EXTERNAL_API_ERROR",
        )


class APITimeoutError(ExternalAPIError):
    def __init__(self, api_name: str, timeout_seconds: float):
        super().__init__(
            message=f"{api_name} API request timed out after {timeout_seconds:g} seconds",
            api_name=api_name,
            details={"timeout_seconds": timeout_seconds}
        )


class ProviderCallFailedError(ExternalAPIError):
    """
    A single identification provider attempt failed.

    Raised by provider clients and recovered inside the orchestrator,
    which records the message and moves on to the next provider.
    """

    def __init__(
        self,
        provider: str,
        reason: str,
        api_status_code: Optional[int] = None
    ):
        self.provider = provider
        self.reason = reason
        super().__init__(message=reason, api_name=provider, api_status_code=api_status_code)


class NoProviderConfiguredError(NurseryException):
    """
    No identification provider has credentials configured.
    No network call is attempted.
    """

    def __init__(self, message: str = "No plant identification API keys configured"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, error_code="NO_PROVIDER_CONFIGURED")


class AllProvidersFailedError(NurseryException):
    """
    Every configured provider attempt failed.

    ``errors`` holds one ``"<Provider>: <reason>"`` entry per attempt,
    in the order the providers were tried.
    """

    def __init__(
        self,
        errors: List[str],
        message: str = "All plant identification APIs failed"
    ):
        self.errors = list(errors)
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, error_code="ALL_PROVIDERS_FAILED")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = self.errors
        return payload


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(NurseryException):
    """Connection, session or query failure."""

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _collect(details, operation=operation, table=table),
            "DATABASE_ERROR",
        )


class RepositoryError(NurseryException):
    """Repository-level failure wrapping the underlying SQLAlchemy error."""

    def __init__(
        self,
        message: str = "Repository operation failed",
        operation: Optional[str] = None,
        entity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _collect(details, operation=operation, entity=entity),
            "REPOSITORY_ERROR",
        )


class PersistenceWriteFailedError(RepositoryError):
    """
    An identification record could not be created or updated.

    Logged by the orchestrator and never surfaced to the caller.
    """

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Failed to {operation} identification record: {reason}",
            operation=operation,
            entity="plant_identification"
        )


class TransactionError(NurseryException):
    """Commit or rollback failed inside a managed session."""

    def __init__(
        self,
        message: str = "Database transaction failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _collect(details, operation=operation),
            "TRANSACTION_ERROR",
        )


def is_server_error(exception: Exception) -> bool:
    """
    Check if exception represents a server error (5xx).
    """
    if isinstance(exception, (NurseryException, HTTPException)):
        return 500 <= exception.status_code < 600

    return True  # Default to server error for unknown exceptions
