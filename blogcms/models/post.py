"""Blog post database model using SQLModel."""

from datetime import datetime
from typing import Any, cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Boolean, Column, Field, ForeignKey, SQLModel, String

from blogcms.configs.settings import (
    MAX_EXCERPT_LENGTH,
    MAX_SLUG_LENGTH,
    MAX_TITLE_LENGTH,
)
from blogcms.utils.helpers import utc_now


class PostDB(SQLModel, table=True):
    """
    Blog post database model for PostgreSQL.

    Categories and tags live in link tables (``post_categories`` and
    ``post_tags``); FAQ items and internal links are stored inline as JSONB.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_status_updated", "status", "updated_at"),
        Index("ix_posts_status_published", "status", "published_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)

    author_id: UUID | None = Field(
        default=None,
        sa_column=Column(
            "author_id",
            ForeignKey("authors.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )

    title: str = Field(sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False))
    slug: str = Field(
        sa_column=Column(String(MAX_SLUG_LENGTH), unique=True, nullable=False, index=True),
    )
    excerpt: str = Field(default="", sa_column=Column(String(MAX_EXCERPT_LENGTH), nullable=False))
    content: str = Field(default="", sa_column=Column(Text, nullable=False))
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True),
        description="Post status (draft, published, archived)",
    )

    featured_image_url: str | None = Field(default=None, sa_column=Column(String(2048)))
    seo_title: str | None = Field(default=None, sa_column=Column(String(MAX_TITLE_LENGTH)))
    seo_description: str = Field(
        default="",
        sa_column=Column(String(MAX_EXCERPT_LENGTH), nullable=False),
    )

    faq_items: list[Any] = Field(default_factory=list, sa_column=Column(JSONB, nullable=False))
    internal_links: list[Any] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False),
    )

    template_enabled: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))
    template_type: str | None = Field(default=None, sa_column=Column(String(100)))
    is_featured: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))
    reading_time: int | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    published_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
    )
