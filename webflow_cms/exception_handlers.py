"""
Error envelope for the Webflow CMS proxy

Every failure, whether raised by the Webflow client, the field codec or
FastAPI itself, reaches the admin UI in one shape:

{
    "error": {
        "status_code": 502,
        "error_code": "PROVIDER_ERROR",
        "message": "Failed to fetch collections",
        "type": "Bad Gateway",
        "details": {"operation": "list_collections", "upstream_status": 401},
        "path": "/api/collections/site/abc"
    }
}

The UI keys off ``error_code``: VALIDATION_REQUIRED_FIELD carries
``details.field_errors`` for inline form errors, everything else is a banner.
"""

import logging
from typing import Any, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from webflow_cms.exceptions import CMSError, ErrorCode

logger = logging.getLogger(__name__)

# statuses this proxy actually answers with
ERROR_TYPES = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Validation Error",
    500: "Internal Server Error",
    502: "Bad Gateway",
    504: "Gateway Timeout",
}

HTTP_ERROR_CODES = {
    400: ErrorCode.VALIDATION_FAILED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    405: ErrorCode.VALIDATION_FAILED,
    422: ErrorCode.VALIDATION_FAILED,
    500: ErrorCode.INTERNAL_ERROR,
    502: ErrorCode.PROVIDER_ERROR,
    504: ErrorCode.PROVIDER_TIMEOUT,
}


def get_error_type(status_code: int) -> str:
    return ERROR_TYPES.get(status_code, "Error")


def get_http_error_code(status_code: int) -> str:
    """Error code for a plain HTTPException, e.g. an unmatched route."""
    return HTTP_ERROR_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR).value


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    """Build the ``{"error": {...}}`` envelope; empty details and path are omitted."""
    body: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": get_error_type(status_code),
    }
    if error_code:
        body["error_code"] = ErrorCode(error_code).value
    if details:
        body["details"] = details
    if path:
        body["path"] = path
    return JSONResponse(status_code=status_code, content={"error": body})


async def cms_exception_handler(request: Request, exc: CMSError) -> JSONResponse:
    # upstream and configuration failures are ours to fix; the rest are caller errors
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.error_code.value}: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "operation": exc.details.get("operation"),
        },
    )
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        path=request.url.path,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(f"{exc.status_code} on {request.url.path}: {exc.detail}")
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=get_http_error_code(exc.status_code),
        path=request.url.path,
    )


def _flatten_errors(exc: Union[RequestValidationError, PydanticValidationError]) -> list[dict[str, str]]:
    """One entry per pydantic error, with ``body`` dropped from request locations."""
    skip = "body" if isinstance(exc, RequestValidationError) else None
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != skip),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """Malformed request bodies, such as an edit state that is not an object."""
    errors = _flatten_errors(exc)
    logger.warning(f"Rejected body on {request.url.path} ({len(errors)} errors)", extra={"path": request.url.path})
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code=ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
        path=request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort. The exception text stays in the log and never reaches the UI."""
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code=ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CMSError, cms_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
