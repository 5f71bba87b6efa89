# blogcms/routes/blog.py

"""
Public Blog Routes.

Serves the blog homepage feed: recent and featured published posts, the
published post count, and the most popular categories.
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from blogcms.db import transaction
from blogcms.models import AuthorDB, PostDB
from blogcms.repositories import AuthorRepository, PostRepository
from blogcms.security import RequestContext, RouteMeta, SecureRoutePipeline, SecureRouter

DEFAULT_CATEGORIES = (
    "Nightlife",
    "Food",
    "Adventure",
    "Beaches",
    "Culture",
    "Hiking",
    "City Guides",
    "Hidden Gems",
)
DEFAULT_AUTHOR = "Blog Team"
DEFAULT_READING_TIME = 5
DEFAULT_RECENT = 12
DEFAULT_FEATURED = 6


def feed_post(post: PostDB, author: AuthorDB | None) -> dict[str, Any]:
    """Shape a post for the homepage feed."""
    return {
        "id": str(post.id),
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "published_at": post.published_at.isoformat() if post.published_at else None,
        "reading_time": post.reading_time or DEFAULT_READING_TIME,
        "featured_image": {"file_url": post.featured_image_url} if post.featured_image_url else None,
        "author": author.display_name if author else DEFAULT_AUTHOR,
    }


def create_router(pipeline: SecureRoutePipeline) -> APIRouter:
    """Build the public blog router on ``pipeline``."""
    router = APIRouter(prefix="/api/blog", tags=["📰 Blog"])
    secure = SecureRouter(pipeline, router)

    @secure.get(
        "",
        preset="public",
        summary="Blog homepage feed",
        validation={
            "query": {
                "recent": {"type": "number", "optional": True, "min": 1, "max": 50},
                "featured": {"type": "number", "optional": True, "min": 1, "max": 24},
            },
        },
    )
    async def blog_feed(context: RequestContext, meta: RouteMeta) -> ORJSONResponse:
        """Recent and featured posts; featured falls back to the newest posts."""
        recent_count = int(context.query.get("recent", DEFAULT_RECENT))
        featured_count = int(context.query.get("featured", DEFAULT_FEATURED))

        async with transaction() as session:
            repo = PostRepository(session)
            recent = await repo.list_published(recent_count)
            featured = await repo.list_published(featured_count, featured=True)
            total = await repo.count_published()
            categories = await repo.popular_categories()
            authors = await AuthorRepository(session).get_many(
                post.author_id for post in [*recent, *featured]
            )

        if not featured:
            featured = recent[:featured_count]

        def shape(post: PostDB) -> dict[str, Any]:
            return feed_post(post, authors.get(post.author_id) if post.author_id else None)

        return ORJSONResponse(
            content={
                "recent_posts": [shape(post) for post in recent],
                "featured_posts": [shape(post) for post in featured],
                "total_posts": total,
                "categories": categories or list(DEFAULT_CATEGORIES),
            },
        )

    return router
