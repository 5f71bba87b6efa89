"""Request validation errors."""

from collections.abc import Iterable

from starlette.status import HTTP_400_BAD_REQUEST

from blogcms.errors.base import BaseAppError
from blogcms.schemas.validation import ValidationFailure


class ValidationError(BaseAppError):
    """Raised with every failing field of a request, never a partial list."""

    def __init__(
        self,
        failures: Iterable[ValidationFailure],
        detail: str = "Request validation failed",
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST, "validation_error")
        self.failures: tuple[ValidationFailure, ...] = tuple(failures)


class MalformedBodyError(BaseAppError):
    """Raised when a request body is not valid JSON."""

    def __init__(self, detail: str = "Request body must be valid JSON") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST, "invalid_body")


class BadRequestError(BaseAppError):
    """Raised by handlers for well-formed input that the domain rejects."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST, "bad_request")
