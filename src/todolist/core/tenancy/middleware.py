"""Tenant resolution middleware.

Resolves the tenant for every request before routing and attaches the
resulting TenantContext to ``request.state.tenant_context``.
"""

from typing import TYPE_CHECKING

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from todolist.config import settings
from todolist.core.errors import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
)
from todolist.core.tenancy.context import MAIN_DOMAIN_CONTEXT, TenantContext
from todolist.core.tenancy.resolver import TenantResolver


if TYPE_CHECKING:
    from starlette.types import ASGIApp


class TenantResolutionMiddleware(BaseHTTPMiddleware):
    """Middleware that resolves the request's tenant from its Host header.

    An unknown or inactive subdomain ends the request with a 404 problem
    response rendered by the regular exception handlers.

    Attributes:
        exclude_paths: Paths served without tenant resolution
    """

    def __init__(
        self,
        app: "ASGIApp",
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or [
            "/health",
            "/info",
            "/docs",
            "/redoc",
            "/openapi.json",
        ]

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Resolve the tenant, then hand the request on.

        Args:
            request: The incoming request
            call_next: The next middleware/handler

        Returns:
            The response from the handler, or a problem response
        """
        if any(request.url.path.startswith(path) for path in self.exclude_paths):
            request.state.tenant_context = MAIN_DOMAIN_CONTEXT
            return await call_next(request)

        try:
            context = await self._resolve(request)
        except AppException as exc:
            return await app_exception_handler(request, exc)
        except Exception as exc:
            return await generic_exception_handler(request, exc)

        request.state.tenant_context = context
        if context.tenant_id is not None:
            request.state.tenant_id = context.tenant_id
            structlog.contextvars.bind_contextvars(tenant_id=str(context.tenant_id))

        return await call_next(request)

    async def _resolve(self, request: Request) -> TenantContext:
        from todolist.modules.tenants.repos import TenantRepository  # noqa: PLC0415

        database = request.app.state.database
        cache = getattr(request.app.state, "tenant_cache", None)

        async with database.session_factory() as session:
            resolver = TenantResolver.from_settings(
                settings,
                TenantRepository(session),
                cache=cache,
            )
            return await resolver.resolve(request.headers.get("host", ""))
