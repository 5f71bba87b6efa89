"""Post section database model."""

from datetime import datetime
from typing import Any, cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Boolean, Column, Field, ForeignKey, SQLModel, String

from blogcms.utils.helpers import utc_now


class SectionDB(SQLModel, table=True):
    """A templated content block of a post, ordered by ``position``."""

    __tablename__ = cast("declared_attr[str]", "post_sections")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    post_id: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    template_id: str = Field(sa_column=Column(String(100), nullable=False))
    position: float = Field(default=0, nullable=False)
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False))
    data: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONB, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
