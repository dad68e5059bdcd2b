"""FastAPI dependencies for authentication and tenant gating.

This module provides FastAPI dependency injection functions for:
- Authenticating the bearer token through the AccessGuard
- Role gates composed after authentication
- Requiring a tenant host or the main domain
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from todolist.core.auth.guard import AccessGuard, AuthenticatedContext
from todolist.core.errors import ForbiddenError
from todolist.core.tenancy.context import TenantContext, TenantInfo, get_tenant_context
from todolist.modules.users.models import Role
from todolist.modules.users.repos import UserRepo


# HTTP Bearer token security scheme
bearer_scheme = HTTPBearer(auto_error=False)

BearerCredentials = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]
CurrentTenantContext = Annotated[TenantContext, Depends(get_tenant_context)]


def get_access_guard(users: UserRepo) -> AccessGuard:
    return AccessGuard(users)


Guard = Annotated[AccessGuard, Depends(get_access_guard)]


def _attach_identity(request: Request, auth: AuthenticatedContext) -> None:
    request.state.user_id = auth.user_id
    structlog.contextvars.bind_contextvars(user_id=str(auth.user_id))


async def get_current_auth(
    request: Request,
    context: CurrentTenantContext,
    credentials: BearerCredentials,
    guard: Guard,
) -> AuthenticatedContext:
    """Authenticate the request's bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired
        ForbiddenError: If the user belongs to another tenant
    """
    auth = await guard.authenticate(
        context, credentials.credentials if credentials else None
    )
    _attach_identity(request, auth)
    return auth


async def get_optional_auth(
    request: Request,
    context: CurrentTenantContext,
    credentials: BearerCredentials,
    guard: Guard,
) -> AuthenticatedContext | None:
    """Authenticate if a valid token is present, otherwise return None."""
    auth = await guard.try_authenticate(
        context, credentials.credentials if credentials else None
    )
    if auth is not None:
        _attach_identity(request, auth)
    return auth


CurrentAuth = Annotated[AuthenticatedContext, Depends(get_current_auth)]
OptionalAuth = Annotated[AuthenticatedContext | None, Depends(get_optional_auth)]


def require_role(*roles: Role) -> Callable[..., Awaitable[AuthenticatedContext]]:
    """Build a dependency that authenticates and then checks the role.

    Usage:
        @router.get("/", dependencies=[Depends(require_role(Role.ADMIN))])
    """

    async def role_checker(auth: CurrentAuth) -> AuthenticatedContext:
        return AccessGuard.require_role(auth, roles)

    return role_checker


AdminAuth = Annotated[AuthenticatedContext, Depends(require_role(Role.ADMIN))]


async def require_tenant(context: CurrentTenantContext) -> TenantInfo:
    """Require a request resolved to a tenant.

    Raises:
        ForbiddenError: If the request has no tenant (main domain)
    """
    if context.tenant is None:
        raise ForbiddenError(
            "This operation requires a tenant subdomain",
            error_code="tenant_required",
        )
    return context.tenant


async def require_main_domain(context: CurrentTenantContext) -> TenantContext:
    """Require a request addressed to the main domain.

    Raises:
        ForbiddenError: If the request resolved to a tenant subdomain
    """
    if not context.is_main_domain:
        raise ForbiddenError(
            "This operation is only available on the main domain",
            error_code="main_domain_required",
        )
    return context


CurrentTenant = Annotated[TenantInfo, Depends(require_tenant)]
MainDomain = Annotated[TenantContext, Depends(require_main_domain)]
