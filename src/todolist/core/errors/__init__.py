"""Error handling module with RFC 7807 Problem Details."""

from todolist.core.errors.exceptions import (
    AppException,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    TenantNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from todolist.core.errors.handlers import (
    STATUS_CODES,
    FieldError,
    ProblemDetail,
    app_exception_handler,
    generic_exception_handler,
    register_exception_handlers,
    status_code_for,
)


__all__ = [
    "STATUS_CODES",
    # Exceptions
    "AppException",
    "ConflictError",
    # Handlers
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "ProblemDetail",
    "TenantNotFoundError",
    "UnauthorizedError",
    "ValidationError",
    "app_exception_handler",
    "generic_exception_handler",
    "register_exception_handlers",
    "status_code_for",
]
