"""
attendance_backend/middleware/error_handler.py
Global error handling.

Every error leaving the API, whether raised by a handler, by request
validation, by the database or by the rate limiter, is converted here into
the standard envelope. Nothing is retried.
"""
import logging
import re
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from attendance_backend.errors import (
    APIError,
    BadRequestError,
    ConflictError,
    ErrorCode,
    InternalError,
    NotFoundError,
    RateLimitError,
    new_log_id,
)

logger = logging.getLogger(__name__)

_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (.+)")
_POSTGRES_KEY = re.compile(r"Key \((.+?)\)=")


def translate_integrity_error(exc: IntegrityError) -> APIError:
    """
    Map a constraint violation that slipped past the application checks
    (a concurrent write, usually) onto the public error taxonomy.
    """
    text = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = text.lower()

    if "unique" in lowered or "duplicate key" in lowered:
        fields = "field"
        match = _SQLITE_UNIQUE.search(text)
        if match:
            # "users.email" or "departments.name, departments.faculty_id"
            fields = ", ".join(part.strip().split(".")[-1] for part in match.group(1).split(","))
        else:
            match = _POSTGRES_KEY.search(text)
            if match:
                fields = match.group(1)
        return ConflictError(f"Duplicate value for {fields}")

    if "foreign key" in lowered:
        return BadRequestError("Invalid reference to related resource", ErrorCode.INVALID_REFERENCE)

    return BadRequestError("Invalid data provided")


def _validation_details(exc: RequestValidationError) -> list:
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append({
            "field": ".".join(location),
            "message": error.get("msg"),
            "type": error.get("type"),
        })
    return details


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Install the exception handlers on app. debug adds tracebacks to 500s."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(f"API error on {request.method} {request.url.path}: {exc.code} - {exc.message}")
        return exc.to_response()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        logger.warning(f"Validation error on {request.url.path}: {details}")
        error = BadRequestError("Validation failed", ErrorCode.VALIDATION_ERROR, {"errors": details})
        return error.to_response()

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        error = translate_integrity_error(exc)
        logger.warning(f"Constraint violation on {request.url.path}: {exc.orig}")
        return error.to_response()

    @app.exception_handler(NoResultFound)
    async def no_result_handler(request: Request, exc: NoResultFound):
        return NotFoundError("Resource").to_response()

    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}")
        return RateLimitError().to_response()

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = f"Not found - {request.url.path}"
            code = ErrorCode.NOT_FOUND
        else:
            message = str(exc.detail)
            code = ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.INVALID_INPUT
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": message, "code": code},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log_id = new_log_id()
        logger.error(
            f"[{log_id}] Unhandled exception on {request.url.path}: {type(exc).__name__}: {str(exc)}",
            exc_info=exc,
        )
        if debug:
            error = InternalError(str(exc) or "Internal Server Error", log_id)
            content = error.to_dict()
            content["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
            return JSONResponse(status_code=error.status_code, content=content)
        return InternalError(log_id=log_id).to_response()
