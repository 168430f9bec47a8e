"""
Exception handlers for the FastAPI application.

Every error response shares the ``{"error", "message", "status_code"}`` shape.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clinic.core.exceptions import ClinicError

logger = logging.getLogger(__name__)


async def clinic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Translate service-level failures into their HTTP status."""
    if not isinstance(exc, ClinicError):
        return await global_exception_handler(request, exc)

    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    content = {"error": True, "status_code": exc.status_code}
    content.update(exc.to_dict())
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTP errors, including unmatched routes, with consistent response format."""
    http_exc = exc
    if not isinstance(http_exc, StarletteHTTPException):
        http_exc = StarletteHTTPException(status_code=500, detail=str(exc))
    return JSONResponse(
        status_code=http_exc.status_code,
        content={
            "error": True,
            "message": http_exc.detail,
            "status_code": http_exc.status_code,
        },
        headers=http_exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with per-field messages."""
    if not isinstance(exc, RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": True, "message": str(exc), "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY},
        )

    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": True,
            "message": "Validation error",
            "details": errors,
            "status_code": status.HTTP_422_UNPROCESSABLE_ENTITY,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions with traceback and return a generic 500."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=exc,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": "Internal server error",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClinicError, clinic_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
