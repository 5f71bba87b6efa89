"""Database models for the application."""

from blogcms.models.author import AuthorDB
from blogcms.models.post import PostDB
from blogcms.models.section import SectionDB
from blogcms.models.taxonomy import CategoryDB, PostCategoryLink, PostTagLink, TagDB

__all__ = [
    "AuthorDB",
    "CategoryDB",
    "PostCategoryLink",
    "PostDB",
    "PostTagLink",
    "SectionDB",
    "TagDB",
]
