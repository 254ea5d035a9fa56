"""Tests for bearer token handling."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from macros_chef.domain.errors import AuthenticationError
from macros_chef.services.auth import TokenService
from tests.conftest import TEST_JWT_SECRET


def test_issue_and_verify_roundtrip(token_service: TokenService) -> None:
    token = token_service.issue(42, "chef@example.com")

    user = token_service.verify(token)

    assert user.id == 42
    assert user.email == "chef@example.com"


def test_verify_rejects_other_secret(token_service: TokenService) -> None:
    other = TokenService(secret="another-secret-with-at-least-32-bytes")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        token_service.verify(other.issue(42))


def test_verify_rejects_expired_token(token_service: TokenService) -> None:
    issued_at = datetime.now(tz=UTC) - timedelta(days=8)
    token = jwt.encode(
        {"userId": 42, "iat": issued_at, "exp": issued_at + timedelta(days=7)},
        TEST_JWT_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_verify_rejects_missing_user_claim(token_service: TokenService) -> None:
    token = jwt.encode(
        {"email": "x@example.com", "exp": datetime.now(tz=UTC) + timedelta(hours=1)},
        TEST_JWT_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_verify_rejects_garbage(token_service: TokenService) -> None:
    with pytest.raises(AuthenticationError):
        token_service.verify("not-a-jwt")
