"""Author database model."""

from typing import cast
from uuid import UUID, uuid4

from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class AuthorDB(SQLModel, table=True):
    """Byline shown on posts; referenced by ``posts.author_id``."""

    __tablename__ = cast("declared_attr[str]", "authors")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    display_name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str | None = Field(default=None, sa_column=Column(String(255)))
