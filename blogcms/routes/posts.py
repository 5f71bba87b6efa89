# blogcms/routes/posts.py

"""
Admin Post Routes.

CRUD endpoints for blog posts, including category and tag bookkeeping.

Summary
-------
Endpoints include:
  - List posts (status filter, search, pagination)
  - Create post
  - Get post by id
  - Update post
  - Delete post

Security
--------
Every endpoint is registered through the secure route pipeline with the
``admin`` preset: admin role required, ``admin`` rate-limit class, and the
declared query/body/params contract validated before the handler runs.
"""

from math import ceil
from typing import Any
from uuid import UUID

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from blogcms.configs import DEFAULT_PAGE_SIZE, POST_STATUSES, UUID_PATTERN
from blogcms.db import transaction
from blogcms.errors import BadRequestError, ConflictError
from blogcms.models import AuthorDB, PostDB
from blogcms.repositories import AuthorRepository, PostRepository, TaxonomyRepository
from blogcms.security import RequestContext, RouteMeta, SecureRoutePipeline, SecureRouter
from blogcms.utils.helpers import utc_now

ID_PARAMS = {"id": {"type": "string", "pattern": UUID_PATTERN}}
OPTIONAL_ARRAY = {"type": "array", "optional": True}


def db_post_to_response(
    post: PostDB,
    *,
    categories: list[str] | None = None,
    tags: list[str] | None = None,
    author: AuthorDB | None = None,
) -> dict[str, Any]:
    """
    Serialize a post with its taxonomy names and author.

    Parameters
    ----------
    post : PostDB
        Database post entity.
    categories, tags : list[str] | None
        Names linked to the post.
    author : AuthorDB | None
        The post's author, when it has one.

    Returns
    -------
    dict[str, Any]
        JSON-ready post.
    """
    content = post.model_dump(mode="json")
    content["categories"] = categories or []
    content["tags"] = tags or []
    content["author"] = author.model_dump(mode="json") if author else None
    return content


async def _require_author(session: AsyncSession, author_id: str | None) -> UUID | None:
    if not author_id:
        return None
    author_uuid = UUID(author_id)
    if not await AuthorRepository(session).exists(author_uuid):
        mssg = "Invalid author ID provided"
        raise BadRequestError(mssg)
    return author_uuid


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _post_fields(body: Any) -> dict[str, Any]:
    """Column values shared by create and update."""
    title = body["title"].strip()
    return {
        "title": title,
        "slug": body["slug"].strip(),
        "excerpt": _text(body.get("excerpt")),
        "content": body.get("content") or "",
        "featured_image_url": body.get("featured_image_url") or None,
        "seo_title": body.get("seo_title") or title,
        "seo_description": _text(body.get("seo_description")),
        "faq_items": body.get("faq_items") or [],
        "template_enabled": body.get("template_enabled", False),
        "template_type": body.get("template_type") or None,
    }


async def _sync_taxonomy(session: AsyncSession, post_id: UUID, body: Any) -> None:
    taxonomy = TaxonomyRepository(session)
    if "categories" in body:
        await taxonomy.replace_categories(post_id, body["categories"])
    if "tags" in body:
        await taxonomy.replace_tags(post_id, body["tags"])


async def _post_response(session: AsyncSession, post: PostDB, **extra: Any) -> dict[str, Any]:
    posts = PostRepository(session)
    categories = await posts.category_names([post.id])
    tags = await posts.tag_names([post.id])
    authors = await AuthorRepository(session).get_many([post.author_id])
    content = db_post_to_response(
        post,
        categories=categories.get(post.id),
        tags=tags.get(post.id),
        author=authors.get(post.author_id) if post.author_id else None,
    )
    content.update(extra)
    return content


def create_router(pipeline: SecureRoutePipeline) -> APIRouter:
    """Build the admin posts router on ``pipeline``."""
    router = APIRouter(prefix="/api/admin/posts", tags=["📝 Posts"])
    secure = SecureRouter(pipeline, router)
    registry = pipeline.registry

    post_body = {
        **registry.fragment("blog_post"),
        "categories": OPTIONAL_ARRAY,
        "tags": OPTIONAL_ARRAY,
        "faq_items": OPTIONAL_ARRAY,
    }

    @secure.get(
        "",
        preset="admin",
        summary="List posts",
        validation={
            "query": {
                "status": {
                    "type": "string",
                    "optional": True,
                    "allowedValues": [*POST_STATUSES, "all"],
                },
                **registry.fragment("search"),
                **registry.fragment("pagination"),
            },
        },
    )
    async def list_posts(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """List posts, most recently updated first."""
        page = int(context.query.get("page", 1))
        limit = int(context.query.get("limit", DEFAULT_PAGE_SIZE))

        async with transaction() as session:
            repo = PostRepository(session)
            posts, total = await repo.list_posts(
                status=context.query.get("status"),
                search=context.query.get("search"),
                skip=(page - 1) * limit,
                limit=limit,
            )
            post_ids = [post.id for post in posts]
            categories = await repo.category_names(post_ids)
            tags = await repo.tag_names(post_ids)
            authors = await AuthorRepository(session).get_many(post.author_id for post in posts)

        return ORJSONResponse(
            content={
                "posts": [
                    db_post_to_response(
                        post,
                        categories=categories.get(post.id),
                        tags=tags.get(post.id),
                        author=authors.get(post.author_id) if post.author_id else None,
                    )
                    for post in posts
                ],
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": ceil(total / limit),
                },
            },
        )

    @secure.post("", preset="admin", summary="Create post", validation={"body": post_body})
    async def create_post(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """Create a post; 409 when the slug is taken."""
        body = context.body
        status = body.get("status") or "draft"
        now = utc_now()

        async with transaction() as session:
            author_id = await _require_author(session, body.get("author_id"))
            repo = PostRepository(session)
            fields = _post_fields(body)
            if await repo.slug_exists(fields["slug"]):
                mssg = "A post with this slug already exists"
                raise ConflictError(mssg)

            post = await repo.create(
                {
                    **fields,
                    "author_id": author_id,
                    "status": status,
                    "created_at": now,
                    "updated_at": now,
                    "published_at": now if status == "published" else None,
                },
            )
            await _sync_taxonomy(session, post.id, body)
            content = await _post_response(session, post)

        return ORJSONResponse(content=content, status_code=HTTP_201_CREATED)

    @secure.get("/{id}", preset="admin", summary="Get post", validation={"params": ID_PARAMS})
    async def get_post(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """Get a post by id with its categories and tags."""
        async with transaction() as session:
            post = await PostRepository(session).get_or_raise(UUID(context.params["id"]))
            content = await _post_response(session, post, sections=[])
        return ORJSONResponse(content=content)

    @secure.put(
        "/{id}",
        preset="admin",
        summary="Update post",
        validation={
            "params": ID_PARAMS,
            "body": {**post_body, "internal_links": OPTIONAL_ARRAY},
        },
    )
    async def update_post(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """Update a post; ``published_at`` is stamped on first publish only."""
        body = context.body
        post_id = UUID(context.params["id"])

        async with transaction() as session:
            repo = PostRepository(session)
            post = await repo.get_or_raise(post_id)
            author_id = await _require_author(session, body.get("author_id"))

            changes = _post_fields(body)
            if await repo.slug_exists(changes["slug"], exclude_id=post_id):
                mssg = "A post with this slug already exists"
                raise ConflictError(mssg)

            changes["internal_links"] = body.get("internal_links") or []
            changes["updated_at"] = utc_now()
            if author_id is not None:
                changes["author_id"] = author_id
            if status := body.get("status"):
                changes["status"] = status
                if status == "published" and post.published_at is None:
                    changes["published_at"] = changes["updated_at"]

            post = await repo.update(post, changes)
            await _sync_taxonomy(session, post.id, body)
            content = await _post_response(session, post)

        return ORJSONResponse(content=content)

    @secure.delete("/{id}", preset="admin", summary="Delete post", validation={"params": ID_PARAMS})
    async def delete_post(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """Delete a post. Deleting a missing post still succeeds."""
        async with transaction() as session:
            await PostRepository(session).delete(UUID(context.params["id"]))
        return ORJSONResponse(content={"success": True})

    return router
