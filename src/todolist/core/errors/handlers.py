"""RFC 7807 Problem Details exception handlers.

This is the only place where a typed failure becomes a transport
response. ``STATUS_CODES`` maps every exception kind to its HTTP status.

See: https://tools.ietf.org/html/rfc7807
"""

from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from todolist.config import settings
from todolist.core.errors.exceptions import (
    AppException,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    TenantNotFoundError,
    UnauthorizedError,
    ValidationError,
)


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


STATUS_CODES: dict[type[AppException], int] = {
    AppException: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValidationError: 422,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    TenantNotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
}


def status_code_for(exc: AppException) -> int:
    """Look up the HTTP status for an exception kind.

    Unknown subclasses fall back to their nearest mapped ancestor.
    """
    for klass in type(exc).__mro__:
        if klass in STATUS_CODES:
            return STATUS_CODES[klass]  # type: ignore[index]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


PROBLEM_MEDIA_TYPE = "application/problem+json"


class FieldError(BaseModel):
    """One invalid field in a rejected payload."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 problem document.

    Attributes:
        type: URI naming the problem kind (derived from the error code)
        title: Error code in title case
        status: HTTP status code
        detail: Explanation of this occurrence
        instance: Request path
        errors: Field-level errors, for validation problems
        trace_id: Request ID set by RequestIdMiddleware
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    errors: list[FieldError] | None = None
    trace_id: str | None = None

    model_config = {"extra": "allow"}


def problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    *,
    errors: list[FieldError] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Render a problem document. ``extra`` never overrides standard members."""
    content = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        errors=errors,
        trace_id=getattr(request.state, "trace_id", None),
    ).model_dump(exclude_none=True)

    for key, value in (extra or {}).items():
        content.setdefault(key, value)

    return JSONResponse(status_code=status_code, content=content, media_type=PROBLEM_MEDIA_TYPE)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException. Server-side failures hide message and details."""
    status_code = status_code_for(exc)
    server_error = status_code >= 500

    (logger.error if server_error else logger.warning)(
        "app_exception",
        error_type=type(exc).__name__,
        error_code=exc.error_code,
        message=exc.message,
        status_code=status_code,
        path=request.url.path,
        details=exc.details,
    )

    return problem_response(
        request,
        status_code,
        exc.error_code,
        AppException.message if server_error else exc.message,
        extra=None if server_error else exc.details,
    )


def _field_errors(exc: RequestValidationError) -> list[FieldError]:
    errors = []
    for error in exc.errors():
        # "body" / "query" prefixes are noise for clients
        parts = [str(p) for p in error.get("loc", ()) if p not in ("body", "query")]
        errors.append(
            FieldError(
                field=".".join(parts) or "unknown",
                message=error.get("msg", "Invalid value"),
                type=error.get("type"),
            )
        )
    return errors


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request body or query rejected by pydantic: 422 with field errors."""
    errors = _field_errors(exc)
    logger.warning("validation_error", path=request.url.path, error_count=len(errors))

    return problem_response(
        request,
        STATUS_CODES[ValidationError],
        ValidationError.error_code,
        "Request validation failed",
        errors=errors,
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """A uniqueness violation that got past the service checks."""
    logger.warning("integrity_error", path=request.url.path, error=str(exc.orig))
    return await app_exception_handler(request, ConflictError())


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else: logged with its stack, reported as a bare 500."""
    logger.exception(
        "unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
    )
    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        AppException.error_code,
        "An unexpected error occurred",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    handlers: dict[type[Exception], Any] = {
        AppException: app_exception_handler,
        RequestValidationError: validation_exception_handler,
        IntegrityError: integrity_error_handler,
        Exception: generic_exception_handler,
    }
    for exc_class, handler in handlers.items():
        app.add_exception_handler(exc_class, cast("ExceptionHandler", handler))
