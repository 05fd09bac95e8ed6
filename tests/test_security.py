"""Bearer token handling."""

from datetime import timedelta

import pytest

from app.shared.core.exceptions import AuthenticationError
from app.shared.core.security import create_access_token, verify_token


def test_token_roundtrip_keeps_subject_and_roles() -> None:
    token = create_access_token({"sub": "officer-7", "roles": ["officer"]})

    payload = verify_token(token)

    assert payload["sub"] == "officer-7"
    assert payload["roles"] == ["officer"]
    assert payload["type"] == "access"


def test_expired_token_rejected() -> None:
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(AuthenticationError) as exc_info:
        verify_token(token)

    assert exc_info.value.message == "Token expired"


def test_token_without_subject_rejected() -> None:
    token = create_access_token({"email": "nobody@nursery.test"})

    with pytest.raises(AuthenticationError):
        verify_token(token)


def test_wrong_token_type_rejected() -> None:
    token = create_access_token({"sub": "user-1"})

    with pytest.raises(AuthenticationError):
        verify_token(token, token_type="refresh")
