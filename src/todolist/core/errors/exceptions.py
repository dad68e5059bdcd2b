"""Domain exceptions for the application.

The family is closed: every failure a resolver, guard, service or
repository reports is one of the classes below. Exceptions carry no
transport status; the mapping to HTTP lives in a single table in
``todolist.core.errors.handlers``.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients and logs
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppException):
    """Raised when input is malformed or out of range.

    Example:
        raise ValidationError(
            "Invalid input data",
            errors=[{"field": "title", "message": "Title is required"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class NotFoundError(AppException):
    """Raised when an entity is absent or not visible to the caller's tenant.

    The two cases are deliberately indistinguishable.

    Example:
        raise NotFoundError("Todo not found", resource="todo", resource_id=str(todo_id))
    """

    message = "Resource not found"
    error_code = "not_found"

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class TenantNotFoundError(AppException):
    """Raised when a request hostname does not resolve to an active tenant."""

    message = "Tenant not found"
    error_code = "tenant_not_found"

    def __init__(
        self,
        message: str | None = None,
        subdomain: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if subdomain:
            details["subdomain"] = subdomain
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when a credential is missing, invalid or expired, or the user is unusable.

    Example:
        raise UnauthorizedError("Invalid or expired token", error_code="invalid_token")
    """

    message = "Authentication required"
    error_code = "unauthorized"


class ForbiddenError(AppException):
    """Raised on tenant mismatch, role mismatch or cross-owner access.

    Example:
        raise ForbiddenError("User does not belong to this tenant", error_code="tenant_mismatch")
    """

    message = "Access forbidden"
    error_code = "forbidden"


class ConflictError(AppException):
    """Raised when a uniqueness rule would be violated.

    Example:
        raise ConflictError("Subdomain already exists", details={"subdomain": subdomain})
    """

    message = "Resource conflict"
    error_code = "conflict"
