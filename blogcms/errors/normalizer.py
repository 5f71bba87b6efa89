"""
Error normalization.

Every failure the API reports, whether raised by a pipeline stage, a handler
or escaping to a FastAPI exception handler, is mapped to a ``NormalizedError``
and rendered as::

    {"error": <message>, "code": <code>, "details": [...]}

``details`` is only present for validation errors.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from logging import Logger, getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blogcms.configs import file_logger
from blogcms.configs.settings import DEFAULT_ERROR_MESSAGE
from blogcms.errors.base import BaseAppError
from blogcms.errors.validation import ValidationError
from blogcms.schemas.validation import RuleViolation, Section, ValidationFailure
from blogcms.utils.helpers import host

logger = file_logger(getLogger(__name__))


@dataclass(frozen=True, slots=True)
class NormalizedError:
    """Stable description of a failed request."""

    status_code: int
    code: str
    message: str
    details: tuple[ValidationFailure, ...] = ()

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.code == "validation_error" or self.details:
            content["details"] = [failure.to_dict() for failure in self.details]
        return content


def normalize_error(exc: BaseException) -> NormalizedError:
    """
    Map any exception to a ``NormalizedError``.

    Recognized application errors keep their declared status and code.
    Server-side failures (status >= 500, or anything that is not a
    ``BaseAppError``) collapse to a generic 500 so internal detail is never
    sent to the client.

    Args:
        exc: The exception to normalize.

    Returns:
        The normalized error.
    """
    if isinstance(exc, ValidationError):
        return NormalizedError(exc.status_code, exc.code, exc.detail, exc.failures)

    if isinstance(exc, BaseAppError) and exc.status_code < HTTP_500_INTERNAL_SERVER_ERROR:
        return NormalizedError(exc.status_code, exc.code, exc.detail)

    return NormalizedError(
        HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        DEFAULT_ERROR_MESSAGE,
    )


def error_response(error: NormalizedError) -> ORJSONResponse:
    """Render a normalized error as a JSON response."""
    return ORJSONResponse(content=error.to_content(), status_code=error.status_code)


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        normalized = normalize_error(exc)
        detail = exc.detail if isinstance(exc, BaseAppError) else normalized.message
        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")
        return error_response(normalized)

    return handler


app_exception_handler = create_exception_handler(logger)

_LOCATIONS = {"query": Section.QUERY, "body": Section.BODY, "path": Section.PARAMS}


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Render FastAPI's own ``RequestValidationError`` in the normalized shape.

    Only routes declared with plain FastAPI parameters reach this handler;
    pipeline routes raise ``ValidationError`` themselves.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with the normalized validation error.
    """
    exec_error = cast(RequestValidationError, exc)

    failures = []
    for error in exec_error.errors():
        loc = [str(part) for part in error.get("loc", [])]
        failures.append(
            ValidationFailure(
                field=".".join(loc[1:]),
                rule=RuleViolation.REQUIRED if error.get("type") == "missing" else RuleViolation.TYPE,
                message=error.get("msg", "Invalid value"),
                section=_LOCATIONS.get(loc[0]) if loc else None,
            ),
        )

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {failures}",
    )
    return error_response(normalize_error(ValidationError(failures)))
