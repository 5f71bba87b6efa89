"""Category and tag models and their post link tables."""

from typing import cast
from uuid import UUID, uuid4

from sqlalchemy.orm import declared_attr
from sqlmodel import Boolean, Column, Field, ForeignKey, SQLModel, String


class CategoryDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(sa_column=Column(String(100), nullable=False))
    slug: str = Field(sa_column=Column(String(100), unique=True, nullable=False, index=True))
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False))


class TagDB(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "tags")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    name: str = Field(sa_column=Column(String(100), nullable=False))
    slug: str = Field(sa_column=Column(String(100), unique=True, nullable=False, index=True))


class PostCategoryLink(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "post_categories")

    post_id: UUID = Field(
        sa_column=Column(ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    )
    category_id: UUID = Field(
        sa_column=Column(ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
    )


class PostTagLink(SQLModel, table=True):
    __tablename__ = cast("declared_attr[str]", "post_tags")

    post_id: UUID = Field(
        sa_column=Column(ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    )
    tag_id: UUID = Field(
        sa_column=Column(ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
    )
