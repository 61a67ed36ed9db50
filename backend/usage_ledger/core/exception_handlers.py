"""Map application errors onto the JSON error contract."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from usage_ledger.core.errors import (
    AppError,
    DatabaseError,
    ErrorCode,
    InternalServerError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_CODES_BY_STATUS = {
    400: ErrorCode.BAD_REQUEST.value,
    404: ErrorCode.NOT_FOUND.value,
    409: ErrorCode.CONFLICT.value,
    500: ErrorCode.INTERNAL_SERVER_ERROR.value,
}


def error_response(error: AppError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{field, message}`` pairs."""
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append({"field": ".".join(loc), "message": str(err.get("msg", ""))})
    return details


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, DatabaseError):
        logger.error(
            "Storage failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
    elif exc.status_code >= 500:
        logger.error("Server error on %s %s: %r", request.method, request.url.path, exc)
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationError("Invalid request data", {"details": validation_details(exc)})
    return error_response(error)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    status = exc.status_code
    code = _CODES_BY_STATUS.get(status)
    if code is None:
        try:
            code = HTTPStatus(status).name
        except ValueError:
            code = ErrorCode.UNCLASSIFIED.value
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    error = AppError(message, status_code=status, code=code)
    return JSONResponse(
        status_code=status, content=error.to_dict(), headers=getattr(exc, "headers", None)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(InternalServerError("An unexpected error occurred"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
