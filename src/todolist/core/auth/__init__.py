"""Authentication: credentials, the access guard and its dependencies."""

from todolist.core.auth.backend import (
    MalformedTokenError,
    TokenError,
    TokenExpiredError,
    create_access_token,
    create_password_reset_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from todolist.core.auth.dependencies import (
    AdminAuth,
    CurrentAuth,
    CurrentTenant,
    CurrentTenantContext,
    MainDomain,
    OptionalAuth,
    require_main_domain,
    require_role,
    require_tenant,
)
from todolist.core.auth.guard import AccessGuard, AuthenticatedContext
from todolist.core.auth.middleware import RequestIdMiddleware
from todolist.core.auth.schemas import TokenData, TokenPair


__all__ = [
    # Guard
    "AccessGuard",
    # Dependencies
    "AdminAuth",
    "AuthenticatedContext",
    "CurrentAuth",
    "CurrentTenant",
    "CurrentTenantContext",
    "MainDomain",
    "MalformedTokenError",
    "OptionalAuth",
    # Middleware
    "RequestIdMiddleware",
    # Schemas
    "TokenData",
    "TokenError",
    "TokenExpiredError",
    "TokenPair",
    # Token utilities
    "create_access_token",
    "create_password_reset_token",
    "create_refresh_token",
    "decode_token",
    # Password utilities
    "hash_password",
    "require_main_domain",
    "require_role",
    "require_tenant",
    "verify_password",
]
