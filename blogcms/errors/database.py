from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from blogcms.errors.base import BaseAppError


class NotFoundError(BaseAppError):
    """Raised by handlers when the requested entity does not exist."""

    def __init__(self, detail: str = "Record not found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND, "not_found")


class ConflictError(BaseAppError):
    """Raised by handlers when a write collides with existing data."""

    def __init__(self, detail: str = "A record with this value already exists") -> None:
        super().__init__(detail, HTTP_409_CONFLICT, "conflict")


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code, "internal_error")


class DatabaseConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    def __init__(self, detail: str = "Failed to connect to the database") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class RecordNotFoundError(NotFoundError):
    """Exception raised when a record is not found."""


class DuplicateEntryError(ConflictError):
    """Exception raised when attempting to create a duplicate entry."""
