"""Post repository for database operations."""

from collections import defaultdict
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.sql import Select

from blogcms.models import (
    AuthorDB,
    CategoryDB,
    PostCategoryLink,
    PostDB,
    PostTagLink,
    TagDB,
)
from blogcms.repositories.base import BaseRepository


class PostRepository(BaseRepository[PostDB]):
    """Repository for blog post database operations."""

    model = PostDB

    @staticmethod
    def _filtered(
        statement: Select,
        status: str | None = None,
        search: str | None = None,
    ) -> Select:
        if status and status != "all":
            statement = statement.where(PostDB.status == status)
        if search and (term := search.strip()):
            pattern = f"%{term}%"
            statement = statement.where(
                or_(
                    PostDB.title.ilike(pattern),
                    PostDB.slug.ilike(pattern),
                    PostDB.excerpt.ilike(pattern),
                ),
            )
        return statement

    async def list_posts(
        self,
        *,
        status: str | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[PostDB], int]:
        """
        Page through posts, most recently updated first.

        Args:
            status: Status filter; ``"all"`` or None lists every status.
            search: Case-insensitive match on title, slug or excerpt.
            skip: Rows to skip.
            limit: Page size.

        Returns:
            The page of posts and the total matching the same filters.
        """
        statement = self._filtered(select(PostDB), status, search)
        statement = statement.order_by(PostDB.updated_at.desc()).offset(skip).limit(limit)
        result = await self.session.execute(statement)

        count_statement = self._filtered(select(func.count()).select_from(PostDB), status, search)
        total = (await self.session.execute(count_statement)).scalar() or 0
        return list(result.scalars().all()), total

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        return await self._check_exists_by_field("slug", slug, exclude_id)

    async def list_published(self, limit: int, *, featured: bool = False) -> list[PostDB]:
        statement = select(PostDB).where(PostDB.status == "published")
        if featured:
            statement = statement.where(PostDB.is_featured.is_(True))
        statement = statement.order_by(PostDB.published_at.desc().nulls_last()).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_published(self) -> int:
        statement = select(func.count()).select_from(PostDB).where(PostDB.status == "published")
        return (await self.session.execute(statement)).scalar() or 0

    async def category_names(self, post_ids: Iterable[UUID]) -> dict[UUID, list[str]]:
        """Map each post id to the names of its categories."""
        statement = (
            select(PostCategoryLink.post_id, CategoryDB.name)
            .join(CategoryDB, CategoryDB.id == PostCategoryLink.category_id)
            .where(PostCategoryLink.post_id.in_(list(post_ids)))
            .order_by(CategoryDB.name)
        )
        names: defaultdict[UUID, list[str]] = defaultdict(list)
        for post_id, name in (await self.session.execute(statement)).all():
            names[post_id].append(name)
        return names

    async def tag_names(self, post_ids: Iterable[UUID]) -> dict[UUID, list[str]]:
        """Map each post id to the names of its tags."""
        statement = (
            select(PostTagLink.post_id, TagDB.name)
            .join(TagDB, TagDB.id == PostTagLink.tag_id)
            .where(PostTagLink.post_id.in_(list(post_ids)))
            .order_by(TagDB.name)
        )
        names: defaultdict[UUID, list[str]] = defaultdict(list)
        for post_id, name in (await self.session.execute(statement)).all():
            names[post_id].append(name)
        return names

    async def popular_categories(self, limit: int = 8) -> list[str]:
        """Names of the active categories with the most published posts."""
        statement = (
            select(CategoryDB.name)
            .join(PostCategoryLink, PostCategoryLink.category_id == CategoryDB.id)
            .join(PostDB, PostDB.id == PostCategoryLink.post_id)
            .where(CategoryDB.is_active.is_(True), PostDB.status == "published")
            .group_by(CategoryDB.id, CategoryDB.name)
            .order_by(func.count(PostDB.id).desc(), CategoryDB.name)
            .limit(limit)
        )
        return list((await self.session.execute(statement)).scalars().all())


class AuthorRepository(BaseRepository[AuthorDB]):
    """Repository for post authors."""

    model = AuthorDB

    async def get_many(self, author_ids: Iterable[UUID | None]) -> dict[UUID, AuthorDB]:
        ids = {author_id for author_id in author_ids if author_id is not None}
        if not ids:
            return {}
        result = await self.session.execute(select(AuthorDB).where(AuthorDB.id.in_(ids)))
        return {author.id: author for author in result.scalars().all()}
