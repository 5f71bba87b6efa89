# tests/routes/test_sections.py
"""Tests for blogcms/routes/sections.py module."""

from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from httpx import AsyncClient

from blogcms.errors import RecordNotFoundError
from blogcms.models import SectionDB


@pytest.fixture
def repo() -> Iterator[AsyncMock]:
    sections = AsyncMock()
    with patch("blogcms.routes.sections.SectionRepository", return_value=sections):
        yield sections


class TestCreateSection:
    """Tests for POST /api/admin/sections."""

    @pytest.mark.asyncio
    async def test_creates_with_defaults(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        repo: AsyncMock,
        section_factory: Callable[..., SectionDB],
    ) -> None:
        post_id = str(uuid4())

        async def create(data: dict[str, Any]) -> SectionDB:
            return section_factory(**data)

        repo.create.side_effect = create

        response = await client.post(
            "/api/admin/sections",
            json={"post_id": post_id, "template_id": "gallery"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        repo.create.assert_awaited_once_with(
            {
                "post_id": post_id,
                "template_id": "gallery",
                "position": 0,
                "is_active": True,
                "data": {},
            },
        )
        content = response.json()
        assert content["template_id"] == "gallery"
        assert content["post_id"] == post_id

    @pytest.mark.asyncio
    async def test_reports_every_missing_field(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        repo: AsyncMock,
    ) -> None:
        response = await client.post(
            "/api/admin/sections",
            json={"position": "first"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        failures = {(d["field"], d["rule"]) for d in response.json()["details"]}
        assert failures == {
            ("post_id", "required"),
            ("template_id", "required"),
            ("position", "type"),
        }
        repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_admin(
        self,
        client: AsyncClient,
        user_headers: dict[str, str],
        repo: AsyncMock,
    ) -> None:
        response = await client.post(
            "/api/admin/sections",
            json={"post_id": "p", "template_id": "hero"},
            headers=user_headers,
        )

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"
        repo.create.assert_not_awaited()


class TestUpdateSection:
    """Tests for PUT /api/admin/sections/{id}."""

    @pytest.mark.asyncio
    async def test_merges_data(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        repo: AsyncMock,
        section_factory: Callable[..., SectionDB],
        update_side_effect: Callable[[Any, dict[str, Any]], Any],
    ) -> None:
        section = section_factory(data={"heading": "Welcome", "image": "a.jpg"})
        repo.get_or_raise.return_value = section
        repo.update.side_effect = update_side_effect

        response = await client.put(
            f"/api/admin/sections/{section.id}",
            json={"data": {"heading": "Selamat datang"}, "position": 2.5},
            headers=admin_headers,
        )

        assert response.status_code == 200
        content = response.json()
        assert content["data"] == {"heading": "Selamat datang", "image": "a.jpg"}
        assert content["position"] == 2.5
        assert content["is_active"] is True

    @pytest.mark.asyncio
    async def test_missing_section(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        repo: AsyncMock,
    ) -> None:
        repo.get_or_raise.side_effect = RecordNotFoundError("Section not found")

        response = await client.put(
            f"/api/admin/sections/{uuid4()}",
            json={"is_active": False},
            headers=admin_headers,
        )

        assert response.status_code == 404
        repo.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_id_must_be_uuid(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        repo: AsyncMock,
    ) -> None:
        response = await client.put(
            "/api/admin/sections/42",
            json={"is_active": False},
            headers=admin_headers,
        )

        assert response.status_code == 400
        repo.get_or_raise.assert_not_awaited()


class TestDeleteSection:
    """Tests for DELETE /api/admin/sections/{id}."""

    @pytest.mark.asyncio
    async def test_delete(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        repo: AsyncMock,
    ) -> None:
        section_id = uuid4()

        response = await client.delete(f"/api/admin/sections/{section_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        repo.delete.assert_awaited_once_with(section_id)
