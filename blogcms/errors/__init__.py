from blogcms.errors.auth import AuthenticationError, AuthorizationError
from blogcms.errors.base import BaseAppError, InternalError
from blogcms.errors.database import (
    ConflictError,
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    NotFoundError,
    RecordNotFoundError,
)
from blogcms.errors.normalizer import (
    NormalizedError,
    app_exception_handler,
    create_exception_handler,
    error_response,
    normalize_error,
    validation_exception_handler,
)
from blogcms.errors.rate_limit import RateLimitError
from blogcms.errors.validation import BadRequestError, MalformedBodyError, ValidationError

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BadRequestError",
    "BaseAppError",
    "ConflictError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateEntryError",
    "InternalError",
    "MalformedBodyError",
    "NormalizedError",
    "NotFoundError",
    "RateLimitError",
    "RecordNotFoundError",
    "ValidationError",
    "app_exception_handler",
    "create_exception_handler",
    "error_response",
    "normalize_error",
    "validation_exception_handler",
]
