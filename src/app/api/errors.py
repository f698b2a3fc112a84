"""Exception handlers rendering every failure as the response envelope.

Domain errors carry their own HTTP status (see src/app/core/exceptions.py).
Client errors log at warning, server and provider errors at error.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.core.exceptions import ContentRebirthError, ProviderError
from src.app.schemas.common import failure

logger = structlog.get_logger(__name__)


async def app_error_handler(request: Request, exc: ContentRebirthError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    extra: dict = {}
    if isinstance(exc, ProviderError):
        extra = {"provider": exc.provider, "upstream_status": exc.upstream_status}
    log(
        "api.error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        message=exc.message,
        **extra,
    )
    return JSONResponse(status_code=exc.status_code, content=failure(exc.error, exc.message))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg', 'invalid value')}" if location else first.get("msg")
    logger.warning(
        "api.request_invalid",
        path=request.url.path,
        error_count=len(errors),
        message=message,
    )
    return JSONResponse(status_code=422, content=failure("Invalid request", message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api.unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content=failure("Internal error"))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all envelope handlers to the app."""
    app.add_exception_handler(ContentRebirthError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
