"""Authentication and authorization errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from blogcms.errors.base import BaseAppError


class AuthenticationError(BaseAppError):
    """Raised when the caller has no valid identity."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED, "authentication_required")


class AuthorizationError(BaseAppError):
    """Raised when the caller's role is below the route's requirement."""

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN, "forbidden")
