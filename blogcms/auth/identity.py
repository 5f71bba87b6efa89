"""Identity collaborators consumed by the secure route pipeline."""

from logging import getLogger
from typing import Protocol, runtime_checkable

from starlette.requests import Request

from blogcms.auth.permissions import has_role_or_higher
from blogcms.configs import file_logger
from blogcms.managers.token_manager import decode_access_token
from blogcms.schemas.auth import Principal

logger = file_logger(getLogger(__name__))


@runtime_checkable
class IdentityProvider(Protocol):
    """Resolves and authorizes the caller of a request."""

    async def authenticate(self, request: Request) -> Principal | None:
        """Return the caller's principal, or None when there is none."""
        ...

    async def authorize(self, principal: Principal, required_role: str) -> bool:
        """Return True when ``principal`` holds ``required_role`` or higher."""
        ...


def bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer`` header."""
    authorization = request.headers.get("Authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class TokenIdentityProvider:
    """Identity provider backed by the application's JWT access tokens."""

    async def authenticate(self, request: Request) -> Principal | None:
        token = bearer_token(request)
        if token is None:
            return None

        token_data = decode_access_token(token)
        if token_data is None:
            logger.info(f"Rejected invalid access token for endpoint {request.url.path}")
            return None

        return Principal(
            user_id=token_data.user_id,
            username=token_data.username,
            role=token_data.role,
        )

    async def authorize(self, principal: Principal, required_role: str) -> bool:
        return has_role_or_higher(principal.role, required_role)
