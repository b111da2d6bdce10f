# product_api/errors.py
from enum import Enum
from typing import Optional

from fastapi.responses import JSONResponse
from loguru import logger


class ErrorKind(Enum):
    # (status code, errorType tag, default message)
    UNAUTHORIZED = (401, "UnauthorizedError", "Unauthorized")
    VALIDATION = (400, "ValidationError", "Invalid data")
    NOT_FOUND = (404, "NotFoundError", "Resource not found")
    INTERNAL = (500, "InternalError", "Something went wrong!")

    def __init__(self, status_code: int, tag: str, default_message: str):
        self.status_code = status_code
        self.tag = tag
        self.default_message = default_message

    @property
    def is_operational(self) -> bool:
        return self is not ErrorKind.INTERNAL


class ApiError(Exception):
    """An error raised by a handler and rendered by :func:`error_response`."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @classmethod
    def unauthorized(cls, message: Optional[str] = None) -> "ApiError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def validation(cls, message: Optional[str] = None) -> "ApiError":
        return cls(ErrorKind.VALIDATION, message)

    @classmethod
    def not_found(cls, message: Optional[str] = None) -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, message)

    def __repr__(self) -> str:
        return f"ApiError({self.kind.name}, {self.message!r})"


def error_response(exc: BaseException) -> JSONResponse:
    """Render any error as the uniform JSON envelope.

    Operational errors keep their status code and message. Anything else is
    logged with its traceback and reported as a bare 500.
    """
    if isinstance(exc, ApiError) and exc.kind.is_operational:
        status = "fail" if str(exc.status_code).startswith("4") else "error"
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": status,
                "message": exc.message,
                "errorType": exc.kind.tag,
            },
        )

    logger.opt(exception=exc).error("UNEXPECTED ERROR: {}", type(exc).__name__)
    return JSONResponse(
        status_code=ErrorKind.INTERNAL.status_code,
        content={"status": "error", "message": ErrorKind.INTERNAL.default_message},
    )
