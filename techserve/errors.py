# techserve/errors.py
import logging

import asyncpg
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def field_errors(exc: RequestValidationError) -> list:
    """Flatten pydantic errors into {field, message} pairs."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return errors


def add_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = field_errors(exc)
        logger.warning(f"Validation error for {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation failed", "errors": errors}
        )

    @app.exception_handler(asyncpg.UniqueViolationError)
    async def unique_violation_handler(request: Request, exc: asyncpg.UniqueViolationError):
        logger.warning(f"Unique violation on {request.url.path}: {str(exc)}")
        return JSONResponse(status_code=409, content={"detail": "Resource already exists"})

    @app.exception_handler(asyncpg.ForeignKeyViolationError)
    async def foreign_key_violation_handler(request: Request, exc: asyncpg.ForeignKeyViolationError):
        logger.warning(f"Foreign key violation on {request.url.path}: {str(exc)}")
        return JSONResponse(status_code=400, content={"detail": "Referenced resource does not exist"})

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
