"""Section repository for database operations."""

from blogcms.models import SectionDB
from blogcms.repositories.base import BaseRepository


class SectionRepository(BaseRepository[SectionDB]):
    """Repository for post section database operations."""

    model = SectionDB
