"""API routers, each built on the secure route pipeline."""

from fastapi import APIRouter

from blogcms.routes import blog, posts, sections
from blogcms.security import SecureRoutePipeline


def create_routers(pipeline: SecureRoutePipeline) -> list[APIRouter]:
    return [
        posts.create_router(pipeline),
        sections.create_router(pipeline),
        blog.create_router(pipeline),
    ]


__all__ = ["create_routers"]
