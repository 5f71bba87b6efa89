"""Repositories for database operations."""

from blogcms.repositories.base import BaseRepository
from blogcms.repositories.post import AuthorRepository, PostRepository
from blogcms.repositories.section import SectionRepository
from blogcms.repositories.taxonomy import TaxonomyRepository

__all__ = [
    "AuthorRepository",
    "BaseRepository",
    "PostRepository",
    "SectionRepository",
    "TaxonomyRepository",
]
