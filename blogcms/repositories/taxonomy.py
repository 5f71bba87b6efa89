"""Category and tag bookkeeping for posts."""

from collections.abc import Iterable
from logging import getLogger
from typing import Any
from uuid import UUID

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from blogcms.configs import file_logger
from blogcms.models import CategoryDB, PostCategoryLink, PostTagLink, TagDB
from blogcms.utils.helpers import slugify

logger = file_logger(getLogger(__name__))


class TaxonomyRepository:
    """
    Resolves category and tag names and replaces a post's links to them.

    Names are matched by exact name or by slug. Unknown names are created;
    a name whose creation fails is skipped rather than failing the request.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def replace_categories(self, post_id: UUID, names: Iterable[Any]) -> list[UUID]:
        ids = [
            category_id
            for name in _clean(names)
            if (category_id := await self._resolve(CategoryDB, name, {"is_active": True}))
        ]
        await self._replace_links(PostCategoryLink, "category_id", post_id, ids)
        return ids

    async def replace_tags(self, post_id: UUID, names: Iterable[Any]) -> list[UUID]:
        ids = [tag_id for name in _clean(names) if (tag_id := await self._resolve(TagDB, name))]
        await self._replace_links(PostTagLink, "tag_id", post_id, ids)
        return ids

    async def _resolve(
        self,
        model: type[CategoryDB] | type[TagDB],
        name: str,
        extra: dict[str, Any] | None = None,
    ) -> UUID | None:
        slug = slugify(name)
        statement = select(model.id).where(or_(model.name == name, model.slug == slug)).limit(1)
        if (found := (await self.session.execute(statement)).scalar_one_or_none()) is not None:
            return found

        record = model(name=name, slug=slug, **(extra or {}))
        try:
            async with self.session.begin_nested():
                self.session.add(record)
        except SQLAlchemyError as e:
            logger.warning(f"Skipping {model.__tablename__} '{name}': {e}")
            return None
        return record.id

    async def _replace_links(
        self,
        link: type[PostCategoryLink] | type[PostTagLink],
        column: str,
        post_id: UUID,
        target_ids: list[UUID],
    ) -> None:
        await self.session.execute(delete(link).where(link.post_id == post_id))
        unique_ids = list(dict.fromkeys(target_ids))
        if unique_ids:
            await self.session.execute(
                insert(link),
                [{"post_id": post_id, column: target_id} for target_id in unique_ids],
            )


def _clean(names: Iterable[Any]) -> list[str]:
    """Keep non-blank string names, stripped, in order."""
    return [name.strip() for name in names if isinstance(name, str) and name.strip()]
