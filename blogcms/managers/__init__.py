from blogcms.managers.rate_limiter import (
    RateLimiter,
    SlowapiRateLimiter,
    get_identifier,
    rate_limit_key,
)
from blogcms.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "RateLimiter",
    "SlowapiRateLimiter",
    "create_access_token",
    "decode_access_token",
    "get_identifier",
    "rate_limit_key",
]
