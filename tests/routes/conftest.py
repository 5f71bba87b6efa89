# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator, AsyncIterator, Callable, Iterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from blogcms.main import create_app
from blogcms.managers import SlowapiRateLimiter
from blogcms.models import AuthorDB, PostDB, SectionDB

ROUTE_MODULES = ("blogcms.routes.posts", "blogcms.routes.sections", "blogcms.routes.blog")


@pytest.fixture
def app() -> FastAPI:
    return create_app(rate_limiter=SlowapiRateLimiter(default_limit="1000/minute", limits={}))


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture(autouse=True)
def fake_transaction(session: AsyncMock) -> Iterator[AsyncMock]:
    """Replace ``transaction()`` in every route module with one yielding ``session``."""

    @asynccontextmanager
    async def _transaction() -> AsyncIterator[AsyncMock]:
        yield session

    patches = [patch(f"{module}.transaction", _transaction) for module in ROUTE_MODULES]
    for p in patches:
        p.start()
    yield session
    for p in patches:
        p.stop()


def apply_changes(record: Any, changes: dict[str, Any]) -> Any:
    for key, value in changes.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def author() -> AuthorDB:
    return AuthorDB(id=uuid4(), display_name="Ayu Lestari", email="ayu@example.com")


def make_post(**overrides: Any) -> PostDB:
    now = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)
    fields: dict[str, Any] = {
        "id": uuid4(),
        "title": "Best Beaches in Bali",
        "slug": "best-beaches-in-bali",
        "excerpt": "Sand, surf and sunsets.",
        "content": "Full article",
        "status": "draft",
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return PostDB(**fields)


def make_section(**overrides: Any) -> SectionDB:
    fields: dict[str, Any] = {
        "id": uuid4(),
        "post_id": str(uuid4()),
        "template_id": "hero",
        "position": 0,
        "is_active": True,
        "data": {"heading": "Welcome"},
    }
    fields.update(overrides)
    return SectionDB(**fields)


@pytest.fixture
def post_factory() -> Callable[..., PostDB]:
    return make_post


@pytest.fixture
def section_factory() -> Callable[..., SectionDB]:
    return make_section


@pytest.fixture
def update_side_effect() -> Callable[[Any, dict[str, Any]], Any]:
    return apply_changes
