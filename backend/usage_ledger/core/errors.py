"""Error taxonomy shared by the API and the billing client.

Every outcome other than success is an ``AppError`` subclass with a fixed
HTTP status and machine-readable ``code``. The server renders them with
``to_dict()``; the client rebuilds the same classes from the response body,
so catching ``DuplicateRecordError`` means the same thing on both sides.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    DUPLICATE_RECORD = "DUPLICATE_RECORD"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"
    BAD_GATEWAY = "BAD_GATEWAY"
    UNCLASSIFIED = "UNCLASSIFIED"


class AppError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    code: str = ErrorCode.INTERNAL_SERVER_ERROR.value
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
        code: str | None = None,
    ):
        self.message = message or self.default_message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"status": "error", "statusCode": self.status_code, "error": error}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(AppError):
    status_code = 400
    code = ErrorCode.BAD_REQUEST.value
    default_message = "Invalid request data"


class NotFoundError(AppError):
    status_code = 404
    code = ErrorCode.NOT_FOUND.value
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    code = ErrorCode.CONFLICT.value
    default_message = "Resource already exists"


class DuplicateRecordError(ConflictError):
    """A usage record with the same idempotency key is already stored."""

    code = ErrorCode.DUPLICATE_RECORD.value
    default_message = "Record already exists"

    @property
    def request_id(self) -> str | None:
        return (self.details or {}).get("requestId")


class DatabaseError(AppError):
    """Any persistence failure other than a duplicate usage record.

    The underlying exception is chained as ``__cause__`` for logging and is
    never rendered to API callers.
    """

    status_code = 500
    code = ErrorCode.DATABASE_ERROR.value
    default_message = "Database error occurred"


class InternalServerError(AppError):
    status_code = 500
    code = ErrorCode.INTERNAL_SERVER_ERROR.value
    default_message = "Internal server error"


# Client-side outcomes


class TransientError(AppError):
    """Failures that are likely to succeed when the request is repeated."""

    @property
    def retryable(self) -> bool:
        return True


class NetworkError(TransientError):
    status_code = 503
    code = ErrorCode.SERVICE_UNAVAILABLE.value
    default_message = "Network error occurred"


class RequestTimeoutError(TransientError):
    status_code = 504
    code = ErrorCode.GATEWAY_TIMEOUT.value
    default_message = "Request timed out"


class InvalidServerResponseError(TransientError):
    status_code = 502
    code = ErrorCode.BAD_GATEWAY.value
    default_message = "Invalid response from server"


class UnclassifiedError(AppError):
    code = ErrorCode.UNCLASSIFIED.value
    default_message = "Request failed"


ERRORS_BY_CODE: dict[str, type[AppError]] = {
    ErrorCode.BAD_REQUEST.value: ValidationError,
    ErrorCode.NOT_FOUND.value: NotFoundError,
    ErrorCode.CONFLICT.value: ConflictError,
    ErrorCode.DUPLICATE_RECORD.value: DuplicateRecordError,
    ErrorCode.DATABASE_ERROR.value: DatabaseError,
    ErrorCode.INTERNAL_SERVER_ERROR.value: InternalServerError,
}


def error_from_body(status_code: int, error: dict[str, Any]) -> AppError:
    """Rebuild the typed error described by an API error body."""
    code = str(error.get("code") or ErrorCode.UNCLASSIFIED.value)
    message = error.get("message")
    details = error.get("details")
    if details is not None and not isinstance(details, dict):
        details = {"details": details}
    error_cls = ERRORS_BY_CODE.get(code)
    if error_cls is None:
        return AppError(message, details, status_code=status_code, code=code)
    return error_cls(message, details, status_code=status_code)
