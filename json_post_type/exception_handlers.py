"""
Error envelope and FastAPI exception handlers.

Every failure leaves the service as

    {"error": {"status_code": 404,
               "error_code": "RESOURCE_POST_NOT_FOUND",
               "message": "Post with id '123' not found",
               "type": "Not Found",
               "details": {"resource_type": "Post", "resource_id": 123},
               "path": "/wp-json/wp/v2/json/123"}}

`details` and `path` are omitted when empty.
"""

import logging
from typing import Any, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from json_post_type.exceptions import ErrorCode, JSONPostTypeException

logger = logging.getLogger(__name__)

# status code -> (reason shown as "type", error code used for plain HTTP errors)
_STATUS_INFO: dict[int, tuple[str, ErrorCode]] = {
    400: ("Bad Request", ErrorCode.VALIDATION_FAILED),
    401: ("Unauthorized", ErrorCode.AUTH_FAILED),
    403: ("Forbidden", ErrorCode.AUTH_PERMISSION_DENIED),
    404: ("Not Found", ErrorCode.RESOURCE_NOT_FOUND),
    405: ("Method Not Allowed", ErrorCode.UNKNOWN_ERROR),
    409: ("Conflict", ErrorCode.UNKNOWN_ERROR),
    422: ("Validation Error", ErrorCode.VALIDATION_FAILED),
    500: ("Internal Server Error", ErrorCode.INTERNAL_ERROR),
}

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_error_type(status_code: int) -> str:
    return _STATUS_INFO.get(status_code, ("Error", ErrorCode.UNKNOWN_ERROR))[0]


def get_http_error_code(status_code: int) -> str:
    return _STATUS_INFO.get(status_code, ("Error", ErrorCode.UNKNOWN_ERROR))[1].value


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the error envelope response."""
    error: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": get_error_type(status_code),
    }
    if error_code:
        error["error_code"] = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if details:
        error["details"] = details
    if path:
        error["path"] = path
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def _log_level(status_code: int) -> int:
    return logging.ERROR if status_code >= 500 else logging.WARNING


async def json_post_type_exception_handler(request: Request, exc: JSONPostTypeException) -> JSONResponse:
    logger.log(
        _log_level(exc.status_code),
        "%s: %s",
        type(exc).__name__,
        exc.message,
        extra={"status_code": exc.status_code, "error_code": exc.error_code.value, "path": request.url.path},
    )
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        path=request.url.path,
        headers=BEARER_CHALLENGE if exc.status_code == status.HTTP_401_UNAUTHORIZED else None,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.log(_log_level(exc.status_code), "HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=get_http_error_code(exc.status_code),
        path=request.url.path,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """Request and model validation failures, one entry per offending field."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Validation failed on %s: %d error(s)", request.url.path, len(errors))
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code=ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
        path=request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Internals stay in the log
    logger.exception("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path)
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code=ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JSONPostTypeException, json_post_type_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
