# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must be set before blogcms settings are imported anywhere.
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from collections.abc import Callable  # noqa: E402
from datetime import timedelta  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402

from blogcms.managers.token_manager import create_access_token  # noqa: E402
from blogcms.schemas.auth import Principal  # noqa: E402


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(user_id=uuid4(), username="editor", role="admin")


@pytest.fixture
def user_principal() -> Principal:
    return Principal(user_id=uuid4(), username="reader", role="user")


@pytest.fixture
def bearer() -> Callable[[Principal], dict[str, str]]:
    """Build an ``Authorization`` header carrying a fresh token for a principal."""

    def _bearer(principal: Principal) -> dict[str, str]:
        token = create_access_token(
            user_id=principal.user_id,
            username=principal.username,
            role=principal.role,
            expires_delta=timedelta(minutes=30),
        )
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def admin_headers(
    admin_principal: Principal,
    bearer: Callable[[Principal], dict[str, str]],
) -> dict[str, str]:
    return bearer(admin_principal)


@pytest.fixture
def user_headers(
    user_principal: Principal,
    bearer: Callable[[Principal], dict[str, str]],
) -> dict[str, str]:
    return bearer(user_principal)
