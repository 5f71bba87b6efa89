from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    username: str
    user_id: UUID
    role: str = "user"
    jti: str
    token_type: str = "access"


class Principal(BaseModel):
    """Authenticated caller handed to route handlers as ``context.identity``."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    username: str
    role: str = "user"
