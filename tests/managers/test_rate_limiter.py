# tests/managers/test_rate_limiter.py
"""Tests for blogcms/managers/rate_limiter.py module."""

from asyncio import gather
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from blogcms.managers.rate_limiter import (
    RateLimiter,
    SlowapiRateLimiter,
    get_identifier,
    rate_limit_key,
)
from blogcms.schemas.auth import Principal


class TestGetIdentifier:
    """Tests for get_identifier function."""

    def test_ignores_api_key_header(self) -> None:
        request = MagicMock()
        request.headers = {"X-API-Key": "test-api-key-123"}

        with patch(
            "blogcms.managers.rate_limiter.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_identifier(request) == "ip:192.168.1.100"

    def test_returns_ip(self) -> None:
        request = MagicMock()
        request.headers = {}

        with patch(
            "blogcms.managers.rate_limiter.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_identifier(request) == "ip:192.168.1.100"


class TestRateLimitKey:
    """Tests for rate_limit_key function."""

    def test_principal_wins_over_address(self) -> None:
        principal = Principal(user_id=uuid4(), username="editor", role="admin")
        request = MagicMock()
        assert rate_limit_key(request, principal) == f"user:{principal.user_id}"

    def test_anonymous_uses_address(self) -> None:
        request = MagicMock()
        request.headers = {"X-API-Key": "key-1"}
        with patch(
            "blogcms.managers.rate_limiter.get_remote_address",
            return_value="10.0.0.5",
        ):
            assert rate_limit_key(request, None) == "ip:10.0.0.5"


class TestSlowapiRateLimiter:
    """Tests for SlowapiRateLimiter class."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(SlowapiRateLimiter(), RateLimiter)

    def test_unknown_class_uses_default_limit(self) -> None:
        limiter = SlowapiRateLimiter(limits={"admin": "10/minute"}, default_limit="3/hour")
        assert limiter.limit_for("admin").amount == 10
        assert limiter.limit_for("reports").amount == 3

    @pytest.mark.asyncio
    async def test_denies_after_limit(self) -> None:
        limiter = SlowapiRateLimiter(limits={"public": "2/minute"})

        results = [await limiter.check_and_consume("public", "ip:1.2.3.4") for _ in range(3)]

        assert results == [True, True, False]

    @pytest.mark.asyncio
    async def test_keys_and_classes_are_counted_separately(self) -> None:
        limiter = SlowapiRateLimiter(limits={"public": "1/minute", "admin": "1/minute"})

        assert await limiter.check_and_consume("public", "ip:1.1.1.1")
        assert await limiter.check_and_consume("public", "ip:2.2.2.2")
        assert await limiter.check_and_consume("admin", "ip:1.1.1.1")
        assert not await limiter.check_and_consume("public", "ip:1.1.1.1")

    @pytest.mark.asyncio
    async def test_concurrent_consumers_never_exceed_limit(self) -> None:
        limiter = SlowapiRateLimiter(limits={"admin": "10/minute"})

        results = await gather(*(limiter.check_and_consume("admin", "user:1") for _ in range(11)))

        assert results.count(True) == 10
        assert results.count(False) == 1

    @pytest.mark.asyncio
    async def test_disabled_limiter_always_allows(self) -> None:
        limiter = SlowapiRateLimiter(limits={"public": "1/minute"})
        limiter.enabled = False

        assert all([await limiter.check_and_consume("public", "ip:1.1.1.1") for _ in range(5)])

    @pytest.mark.asyncio
    async def test_reset_clears_counters(self) -> None:
        limiter = SlowapiRateLimiter(limits={"public": "1/minute"})
        assert await limiter.check_and_consume("public", "ip:1.1.1.1")
        assert not await limiter.check_and_consume("public", "ip:1.1.1.1")

        limiter.reset()

        assert await limiter.check_and_consume("public", "ip:1.1.1.1")
