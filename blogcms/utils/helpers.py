from datetime import UTC, datetime
from re import compile as re_compile
from time import perf_counter

from starlette.requests import Request

_WHITESPACE = re_compile(r"\s+")


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


def time_taken(start_time: float) -> str:
    minutes, seconds = divmod(perf_counter() - start_time, 60)
    return f"{int(minutes)}m {seconds:.2f}s"


def slugify(name: str) -> str:
    """
    Derive the category/tag slug used for lookups.

    Lower-cases the name and replaces each whitespace run with a hyphen.

    Examples:
    --------
    >>> slugify("City Guides")
    'city-guides'
    """
    return _WHITESPACE.sub("-", name.lower())
