from blogcms.auth.identity import IdentityProvider, TokenIdentityProvider, bearer_token
from blogcms.auth.permissions import ROLE_HIERARCHY, has_role_or_higher

__all__ = [
    "ROLE_HIERARCHY",
    "IdentityProvider",
    "TokenIdentityProvider",
    "bearer_token",
    "has_role_or_higher",
]
