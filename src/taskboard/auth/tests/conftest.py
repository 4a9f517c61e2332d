"""Shared fixtures for authentication tests."""

from typing import Any
from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest

from taskboard.auth.dependencies import set_jwt_validator
from taskboard.database.models import User


class InMemoryUserRepository:
    """Stand-in for UserRepository keyed by email."""

    def __init__(self) -> None:
        self.rows: dict[str, User] = {}
        self.fail_with: Exception | None = None

    def get_by_email(self, email: str) -> User | None:
        if self.fail_with is not None:
            raise self.fail_with
        return self.rows.get(email)

    def ensure_user(self, name: str | None, email: str, image: str | None) -> User:
        if self.fail_with is not None:
            raise self.fail_with
        if email not in self.rows:
            self.rows[email] = User(id=uuid4(), name=name, email=email, image=image)
        return self.rows[email]


@pytest.fixture
def mock_user_id() -> UUID:
    """Provide a consistent test user ID."""
    return UUID("123e4567-e89b-12d3-a456-426614174000")


@pytest.fixture
def valid_jwt_token() -> str:
    """Provide a mock valid JWT token for testing."""
    return "eyJhbGciOiJSUzI1NiIsImtpZCI6ImtleS0xIn0.mock.token"


@pytest.fixture
def auth_headers(valid_jwt_token: str) -> dict[str, str]:
    """Generate auth headers for testing."""
    return {"Authorization": f"Bearer {valid_jwt_token}"}


@pytest.fixture
def mock_jwt_claims() -> dict[str, Any]:
    """Claims as issued by Supabase Auth after a GitHub sign-in."""
    return {
        "sub": "8f14e45f-ceea-467f-a0f5-6a2b7f8c9d10",
        "email": "octocat@example.com",
        "role": "authenticated",
        "aud": "authenticated",
        "exp": 9999999999,
        "iat": 1234567890,
        "user_metadata": {
            "full_name": "Mona Octocat",
            "user_name": "octocat",
            "avatar_url": "https://avatars.githubusercontent.com/u/583231",
        },
    }


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def mock_jwt_validator(mock_jwt_claims: dict[str, Any]) -> Mock:
    """JWT validator that accepts any token and returns ``mock_jwt_claims``."""
    validator = Mock()
    validator.verify_token = AsyncMock(return_value=mock_jwt_claims)
    set_jwt_validator(validator)
    yield validator
    set_jwt_validator(None)
