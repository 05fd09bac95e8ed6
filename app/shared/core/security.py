"""
Security utilities for JWT validation.

Tokens are issued by the marketplace's auth service; this service only
verifies them and reads the caller's id and roles from the payload.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from functools import lru_cache

from jose import ExpiredSignatureError, JWTError, jwt

from ..config.settings import get_settings
from .exceptions import AuthenticationError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class SecurityManager:
    """
    Centralized security manager for bearer token handling.
    """

    def __init__(self):
        self.settings = get_settings()
        self.algorithm = self.settings.JWT_ALGORITHM
        self.secret_key = self.settings.JWT_SECRET_KEY
        self.access_token_expire_minutes = self.settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(
        self,
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create JWT access token with user data and expiration.

        Args:
            data: Token payload data, must carry ``sub``
            expires_delta: Custom expiration time

        Returns:
            str: Encoded JWT token
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": "access"
        })

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(
        self,
        token: str,
        token_type: str = "access"
    ) -> Dict[str, Any]:
        """
        Verify and decode JWT token.

        Args:
            token: JWT token to verify
            token_type: Expected token type

        Returns:
            dict: Decoded token payload

        Raises:
            AuthenticationError: If token is invalid, expired or incomplete
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm]
            )
        except ExpiredSignatureError:
            logger.warning("Token has expired")
            raise AuthenticationError("Token expired")
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise AuthenticationError("Could not validate credentials")

        if payload.get("type", token_type) != token_type:
            logger.warning(
                f"Token type mismatch. Expected: {token_type}, Got: {payload.get('type')}"
            )
            raise AuthenticationError("Could not validate credentials")

        if payload.get("exp") is None:
            logger.warning("Token missing expiration")
            raise AuthenticationError("Could not validate credentials")

        if not payload.get("sub"):
            logger.warning("Token missing subject (user_id)")
            raise AuthenticationError("Could not validate credentials")

        return payload


@lru_cache()
def get_security_manager() -> SecurityManager:
    """
    Get cached security manager instance.

    Returns:
        SecurityManager: Singleton security manager
    """
    return SecurityManager()


# Convenience functions for direct usage
def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token."""
    return get_security_manager().create_access_token(data, expires_delta)


def verify_token(token: str, token_type: str = "access") -> Dict[str, Any]:
    """Verify JWT token."""
    return get_security_manager().verify_token(token, token_type)
