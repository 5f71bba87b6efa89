from unittest.mock import AsyncMock

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pytest import mark

from blogcms.main import create_app
from blogcms.security import SecureRoutePipeline


@mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"]
    assert "timestamp" in data


@mark.asyncio
async def test_security_headers(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "max-age" in response.headers["Strict-Transport-Security"]


@mark.asyncio
async def test_request_id_is_echoed_or_generated(client: AsyncClient) -> None:
    echoed = await client.get("/health", headers={"X-Request-ID": "req-123"})
    generated = await client.get("/health")

    assert echoed.headers["X-Request-ID"] == "req-123"
    assert len(generated.headers["X-Request-ID"]) == 36


def test_pipeline_is_exposed_on_state(app: FastAPI) -> None:
    assert isinstance(app.state.pipeline, SecureRoutePipeline)


@mark.asyncio
async def test_admin_routes_fail_closed(client: AsyncClient) -> None:
    for method, path in [
        ("GET", "/api/admin/posts"),
        ("POST", "/api/admin/posts"),
        ("DELETE", "/api/admin/sections/00000000-0000-0000-0000-000000000000"),
    ]:
        response = await client.request(method, path)
        assert response.status_code == 401
        assert response.json()["code"] == "authentication_required"


@mark.asyncio
async def test_rate_limited_request_is_normalized() -> None:
    limiter = AsyncMock()
    limiter.check_and_consume.return_value = False
    app = create_app(rate_limiter=limiter)

    async with AsyncClient(base_url="http://test", transport=ASGITransport(app=app)) as ac:
        response = await ac.get("/api/blog")

    assert response.status_code == 429
    assert response.json() == {"error": "Rate limit exceeded", "code": "rate_limited"}
    limiter.check_and_consume.assert_awaited_once()
    assert limiter.check_and_consume.await_args.args[0] == "public"
