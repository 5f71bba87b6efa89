# tests/errors/test_normalizer.py
"""Tests for blogcms/errors/normalizer.py module."""

from unittest.mock import MagicMock

import orjson
import pytest
from fastapi.exceptions import RequestValidationError

from blogcms.errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    BaseAppError,
    ConflictError,
    DatabaseConnectionError,
    DuplicateEntryError,
    InternalError,
    MalformedBodyError,
    NotFoundError,
    RateLimitError,
    RecordNotFoundError,
    ValidationError,
    create_exception_handler,
    error_response,
    normalize_error,
    validation_exception_handler,
)
from blogcms.schemas.validation import RuleViolation, Section, ValidationFailure


def mock_request(path: str = "/api/admin/posts") -> MagicMock:
    request = MagicMock()
    request.client.host = "192.168.1.1"
    request.url.path = path
    return request


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500
        assert error.code == "internal_error"

    def test_str_representation(self) -> None:
        assert str(BaseAppError("Test error", 400)) == "Test error"


class TestNormalizeError:
    """Tests for normalize_error function."""

    @pytest.mark.parametrize(
        ("error", "status_code", "code"),
        [
            (AuthenticationError(), 401, "authentication_required"),
            (AuthorizationError(), 403, "forbidden"),
            (NotFoundError(), 404, "not_found"),
            (RecordNotFoundError(), 404, "not_found"),
            (ConflictError(), 409, "conflict"),
            (DuplicateEntryError(), 409, "conflict"),
            (RateLimitError("admin"), 429, "rate_limited"),
            (MalformedBodyError(), 400, "invalid_body"),
            (BadRequestError("Invalid author ID provided"), 400, "bad_request"),
        ],
    )
    def test_recognized_errors_keep_status_and_code(
        self,
        error: BaseAppError,
        status_code: int,
        code: str,
    ) -> None:
        normalized = normalize_error(error)
        assert normalized.status_code == status_code
        assert normalized.code == code
        assert normalized.message == error.detail
        assert normalized.details == ()

    @pytest.mark.parametrize(
        "error",
        [
            InternalError("connection string leaked"),
            DatabaseConnectionError("Failed to save record: secret"),
            KeyError("secret"),
            RuntimeError("secret"),
        ],
    )
    def test_server_errors_collapse_to_generic_message(self, error: Exception) -> None:
        normalized = normalize_error(error)
        assert normalized.status_code == 500
        assert normalized.code == "internal_error"
        assert normalized.message == "Internal Server Error"

    def test_validation_error_carries_failures(self) -> None:
        failure = ValidationFailure("slug", RuleViolation.REQUIRED, "slug is required", Section.BODY)
        normalized = normalize_error(ValidationError([failure]))

        assert normalized.status_code == 400
        assert normalized.details == (failure,)
        assert normalized.to_content() == {
            "error": "Request validation failed",
            "code": "validation_error",
            "details": [
                {"field": "slug", "section": "body", "rule": "required", "message": "slug is required"},
            ],
        }

    def test_details_only_present_for_validation_errors(self) -> None:
        assert "details" not in normalize_error(NotFoundError()).to_content()
        assert "details" in normalize_error(ValidationError([])).to_content()


class TestErrorResponse:
    """Tests for error_response and the FastAPI handlers."""

    def test_error_response(self) -> None:
        response = error_response(normalize_error(ConflictError("A post with this slug already exists")))
        assert response.status_code == 409
        assert orjson.loads(response.body) == {
            "error": "A post with this slug already exists",
            "code": "conflict",
        }

    @pytest.mark.asyncio
    async def test_exception_handler_logs_and_normalizes(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(mock_request(), RecordNotFoundError("Post not found"))

        assert response.status_code == 404
        assert orjson.loads(response.body)["error"] == "Post not found"
        logger.warning.assert_called_once()
        assert "192.168.1.1" in logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_request_validation_error_uses_same_shape(self) -> None:
        exc = RequestValidationError(
            [{"type": "missing", "loc": ("query", "page"), "msg": "Field required", "input": None}],
        )

        response = await validation_exception_handler(mock_request(), exc)

        assert response.status_code == 400
        assert orjson.loads(response.body) == {
            "error": "Request validation failed",
            "code": "validation_error",
            "details": [
                {"field": "page", "section": "query", "rule": "required", "message": "Field required"},
            ],
        }
