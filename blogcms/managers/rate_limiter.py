# blogcms/managers/rate_limiter.py

"""Rate limiter collaborators built on slowapi."""

from collections.abc import Mapping
from logging import getLogger
from typing import Protocol, runtime_checkable

from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from blogcms.configs import LimiterConfig, file_logger, settings
from blogcms.schemas.auth import Principal

logger = file_logger(getLogger(__name__))


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Anonymous callers are keyed by client IP. Unverified headers such as
    ``X-API-Key`` are not part of the key.

    Args:
        request: Incoming request.

    Returns:
        Unique identifier string.
    """
    remote_address = get_remote_address(request)
    return f"ip:{remote_address}"


def rate_limit_key(request: Request, principal: Principal | None) -> str:
    """Return the counter key: the principal when known, else the caller."""
    if principal is not None:
        return f"user:{principal.user_id}"
    return get_identifier(request)


@runtime_checkable
class RateLimiter(Protocol):
    """Allow/deny decisions for a rate-limit class and caller key."""

    async def check_and_consume(self, rate_class: str, key: str) -> bool:
        """Consume one request for ``key`` in ``rate_class``; False when over limit."""
        ...


class SlowapiRateLimiter:
    """
    Per-class rate limiter over slowapi's limiter storage and strategy.

    Each rate-limit class maps to a limit string such as ``"100/minute"``.
    Classes without an entry use the default limit. ``check_and_consume``
    calls the strategy's synchronous ``hit``, which tests and increments the
    counter in one step without yielding to the event loop, so concurrent
    requests in a process can never both take the last slot.
    """

    def __init__(
        self,
        limits: Mapping[str, str] | None = None,
        default_limit: str | None = None,
        limiter: Limiter | None = None,
    ) -> None:
        self._limiter = limiter or Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)
        self._limits: dict[str, RateLimitItem] = {
            rate_class: parse(limit)
            for rate_class, limit in (settings.RATE_LIMITS if limits is None else limits).items()
        }
        self._default = parse(default_limit or settings.RATE_LIMIT_DEFAULT)

    @property
    def enabled(self) -> bool:
        return self._limiter.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._limiter.enabled = value

    def limit_for(self, rate_class: str) -> RateLimitItem:
        return self._limits.get(rate_class, self._default)

    async def check_and_consume(self, rate_class: str, key: str) -> bool:
        if not self._limiter.enabled:
            return True

        allowed = self._limiter.limiter.hit(self.limit_for(rate_class), rate_class, key)
        if not allowed:
            logger.warning(f"Rate limit exceeded for class '{rate_class}' by {key}")
        return allowed

    def reset(self) -> None:
        """Clear every counter."""
        self._limiter.reset()

