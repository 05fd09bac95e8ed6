"""
Common FastAPI dependencies for the nursery identification service.
Provides bearer-token authentication and role-based authorization.
"""

from typing import Optional, Dict, Any, List

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .security import get_security_manager
from .exceptions import AuthenticationError, AuthorizationError
from ..utils.logging import get_logger, user_id_var

logger = get_logger(__name__)

# Security scheme for OpenAPI documentation. auto_error is off so that a
# missing header produces our own 401 envelope instead of FastAPI's 403.
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """User information extracted from JWT token."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        is_active: bool = True,
        roles: Optional[List[str]] = None,
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.is_active = is_active
        self.roles = roles or ["farmer"]
        self.token_payload = token_payload or {}

    def has_role(self, role: str) -> bool:
        """Check if user has specific role."""
        return role in self.roles

    def has_any_role(self, roles: List[str]) -> bool:
        """Check if user has any of the specified roles."""
        return any(role in self.roles for role in roles)

    def is_admin(self) -> bool:
        """Check if user has admin privileges."""
        return self.has_role("admin")

    def to_dict(self) -> Dict[str, Any]:
        """Convert user info to dictionary."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "is_active": self.is_active,
            "roles": self.roles
        }


def _roles_from_payload(payload: Dict[str, Any]) -> List[str]:
    roles = payload.get("roles")
    if isinstance(roles, list):
        return [str(r) for r in roles]
    role = payload.get("role")
    if role:
        return [str(role)]
    return ["farmer"]


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Resolve the caller from the bearer token.

    Args:
        request: FastAPI request object
        credentials: Parsed Authorization header, if any

    Returns:
        CurrentUser: Current user information

    Raises:
        AuthenticationError: If the token is missing or invalid
    """
    security_logger = logger.security

    if credentials is None or not credentials.credentials:
        security_logger.log_authentication(None, "bearer_token", False, reason="missing token")
        raise AuthenticationError("Not authorized, no token")

    payload = get_security_manager().verify_token(credentials.credentials)

    current_user = CurrentUser(
        user_id=str(payload["sub"]),
        email=payload.get("email"),
        is_active=payload.get("active", True),
        roles=_roles_from_payload(payload),
        token_payload=payload
    )

    request.state.user_id = current_user.user_id
    user_id_var.set(current_user.user_id)

    logger.debug(f"Current user resolved: {current_user.user_id}")
    return current_user


async def get_current_active_user(
    current_user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """
    Get current active user (not disabled/suspended).

    Raises:
        AuthorizationError: If user is not active
    """
    if not current_user.is_active:
        logger.warning(f"Inactive user attempted access: {current_user.user_id}")
        raise AuthorizationError(
            "Your account is currently disabled. Please contact support."
        )

    return current_user


def require_any_role(required_roles: List[str]):
    """
    Dependency factory for multiple role authorization.

    Admins always pass.

    Args:
        required_roles: List of acceptable roles

    Returns:
        function: Dependency function
    """
    async def role_dependency(
        request: Request,
        current_user: CurrentUser = Depends(get_current_active_user)
    ) -> CurrentUser:
        granted = current_user.is_admin() or current_user.has_any_role(required_roles)
        logger.security.log_authorization(
            current_user.user_id,
            resource=request.url.path,
            action=request.method,
            granted=granted,
            reason=None if granted else f"requires one of {required_roles}"
        )
        if not granted:
            raise AuthorizationError(
                f"User role {','.join(current_user.roles)} is not authorized to access this route",
                required_permission=",".join(required_roles),
                user_id=current_user.user_id
            )
        return current_user

    return role_dependency
