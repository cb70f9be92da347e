"""Error handlers rendering every failure in the same envelope."""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.v1.exceptions import APIError


logger = logging.getLogger(__name__)


def _envelope(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error_code": error_code, "message": message, "details": details}},
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Render APIError subclasses."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed bodies and query strings (wrong types, missing scope)."""
    fields = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return _envelope(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": fields},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log with traceback, answer 500 without internals."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred",
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the app."""
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
