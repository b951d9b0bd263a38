"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to JSON responses shaped {error, message, details}. Status codes
keep the three request-boundary failures apart: tenant resolution (400),
missing caller identity (401), permission denial (403).
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tenancy.core.config import get_settings
from tenancy.domain.exceptions import TenancyException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "TENANT_NOT_FOUND": 400,
    "NO_AUTH_CONTEXT": 401,
    "PERMISSION_DENIED": 403,
    "INSUFFICIENT_ROLE": 403,
    "TENANT_ACCESS_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
}


def status_for_error_code(error_code: str) -> int:
    """HTTP status for a domain error code; unknown codes are server errors."""
    return _ERROR_CODE_STATUS.get(error_code, 500)


def _tenancy_exception_handler(request: Request, exc: TenancyException) -> JSONResponse:
    """Return JSON from TenancyException.to_dict() with the mapped status code."""
    status = status_for_error_code(exc.error_code)
    if status >= 500:
        logger.error("Unmapped domain error %s: %s", exc.error_code, exc.message)
    elif status in (401, 403):
        logger.info(
            "%s %s rejected: %s (%s)",
            request.method,
            request.url.path,
            exc.error_code,
            exc.message,
        )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail, "details": {}},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app. Call once after creating the app."""
    app.add_exception_handler(TenancyException, _tenancy_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
