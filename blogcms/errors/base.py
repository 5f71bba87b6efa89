from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR


class BaseAppError(Exception):
    """
    Base exception class for application errors.

    Subclasses declare the HTTP status and the machine-readable ``code`` the
    error normalizer puts on the wire.
    """

    code: str = "internal_error"

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        code: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return self.detail


class InternalError(BaseAppError):
    """Catch-all for unexpected failures; the detail stays server-side."""

    def __init__(self, detail: str = "Internal Server Error") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR, "internal_error")
