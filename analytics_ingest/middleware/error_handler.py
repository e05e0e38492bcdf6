"""Structured error responses."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog
from ..errors import PersistenceError
from .correlation import get_correlation_id

log = structlog.get_logger()


def _field_name(loc) -> str:
    # Drop the leading "body" / "query" segment FastAPI adds
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {_field_name(err.get("loc", ())): err.get("msg", "Invalid value") for err in exc.errors()}
    log.warning("request.validation_failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "message": "Validation failed",
            "errors": errors,
        },
    )


async def persistence_exception_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    correlation_id = get_correlation_id()
    log.error(
        "request.persistence_failed",
        entity=exc.entity,
        cause=repr(exc.__cause__),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "Internal server error",
            "correlation_id": correlation_id,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    correlation_id = get_correlation_id()
    log.error(
        "unhandled.exception",
        error=str(exc),
        error_type=exc.__class__.__name__,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "message": "An unexpected error occurred",
            "correlation_id": correlation_id,
        },
    )


def register_exception_handlers(app: FastAPI):
    """Install the structured error handlers on an application."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PersistenceError, persistence_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
