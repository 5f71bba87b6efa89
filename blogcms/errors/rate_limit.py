from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from blogcms.errors.base import BaseAppError


class RateLimitError(BaseAppError):
    """Raised when a caller exceeds the limit of a rate-limit class."""

    def __init__(self, rate_class: str, detail: str = "Rate limit exceeded") -> None:
        super().__init__(detail, HTTP_429_TOO_MANY_REQUESTS, "rate_limited")
        self.rate_class = rate_class
