"""
Core utilities package for the nursery identification service.
Provides security helpers and the shared exception hierarchy.
"""

from .security import (
    create_access_token,
    verify_token,
    SecurityManager,
    get_security_manager
)

from .exceptions import (
    NurseryException,
    AuthenticationError,
    AuthorizationError,
    ValidationError,
    NotFoundError,
    ExternalAPIError,
    DatabaseError
)

__all__ = [
    # Security
    "create_access_token",
    "verify_token",
    "SecurityManager",
    "get_security_manager",

    # Exceptions
    "NurseryException",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "ExternalAPIError",
    "DatabaseError",
]
