"""Tenant administration service."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from todolist.api.dependencies import DBSession
from todolist.core.database import Page, TenantScopedRepository
from todolist.core.errors import ConflictError, NotFoundError
from todolist.core.tenancy.cache import OptionalTenantCache
from todolist.core.tenancy.resolver import is_valid_subdomain
from todolist.modules.tenants.models import Tenant
from todolist.modules.tenants.repos import TenantRepo
from todolist.modules.tenants.schemas import (
    SubdomainCheckResponse,
    TenantCreate,
    TenantStatistics,
    TenantUpdate,
    TodoCounts,
    UserCounts,
    normalize_subdomain,
)
from todolist.modules.todos.models import Todo, TodoStatus
from todolist.modules.users.models import User


logger = structlog.get_logger()


class TenantService:
    """Service for tenant administration.

    Subdomains are validated and checked for global uniqueness before any
    create or update. Tenants are deactivated, never deleted. Every change
    that can affect resolution invalidates the cached directory entry.
    """

    def __init__(
        self,
        repo: TenantRepo,
        db: DBSession,
        cache: OptionalTenantCache,
    ) -> None:
        self.repo = repo
        self.db = db
        self.cache = cache

    async def list_tenants(
        self,
        *,
        search: str | None = None,
        is_active: bool | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[Tenant]:
        return await self.repo.list_paginated(
            search=search,
            is_active=is_active,
            page=page,
            page_size=page_size,
        )

    async def get_tenant(self, tenant_id: UUID) -> Tenant:
        """Get a tenant by ID.

        Raises:
            NotFoundError: If the tenant does not exist
        """
        tenant = await self.repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundError(
                "Tenant not found",
                resource="tenant",
                resource_id=str(tenant_id),
            )
        return tenant

    async def create_tenant(self, data: TenantCreate) -> Tenant:
        """Create a tenant.

        Raises:
            ConflictError: If the subdomain is taken
        """
        await self._ensure_subdomain_available(data.subdomain)

        tenant = await self.repo.create(data.model_dump())
        logger.info("tenant_created", tenant_id=str(tenant.id), subdomain=tenant.subdomain)
        return tenant

    async def check_subdomain(self, subdomain: str) -> SubdomainCheckResponse:
        """Report whether a subdomain is well-formed and unused."""
        candidate = normalize_subdomain(subdomain)

        if not is_valid_subdomain(candidate):
            return SubdomainCheckResponse(
                subdomain=candidate, available=False, reason="invalid_format"
            )
        if await self.repo.get_by_subdomain(candidate):
            return SubdomainCheckResponse(
                subdomain=candidate, available=False, reason="taken"
            )
        return SubdomainCheckResponse(subdomain=candidate, available=True)

    async def update_tenant(self, tenant_id: UUID, data: TenantUpdate) -> Tenant:
        """Update a tenant's name, subdomain or branding.

        Raises:
            NotFoundError: If the tenant does not exist
            ConflictError: If the new subdomain is taken
        """
        tenant = await self.get_tenant(tenant_id)
        previous_subdomain = tenant.subdomain

        changes = data.model_dump(exclude_unset=True)
        # name and subdomain are required columns; null means "unchanged"
        for key in ("name", "subdomain"):
            if key in changes and changes[key] is None:
                del changes[key]

        new_subdomain = changes.get("subdomain")
        if new_subdomain and new_subdomain != previous_subdomain:
            await self._ensure_subdomain_available(new_subdomain)

        tenant = await self.repo.update(tenant_id, changes)
        await self._invalidate(previous_subdomain, tenant.subdomain)

        logger.info("tenant_updated", tenant_id=str(tenant_id), fields=sorted(changes))
        return tenant

    async def set_status(self, tenant_id: UUID, is_active: bool) -> Tenant:
        """Activate or deactivate a tenant.

        Raises:
            NotFoundError: If the tenant does not exist
        """
        tenant = await self.repo.update(tenant_id, {"is_active": is_active})
        await self._invalidate(tenant.subdomain)

        logger.info(
            "tenant_activated" if is_active else "tenant_deactivated",
            tenant_id=str(tenant_id),
            subdomain=tenant.subdomain,
        )
        return tenant

    async def get_statistics(self, tenant_id: UUID) -> TenantStatistics:
        """Count a tenant's users and todos.

        Raises:
            NotFoundError: If the tenant does not exist
        """
        await self.get_tenant(tenant_id)

        users = TenantScopedRepository(self.db, User)
        todos = TenantScopedRepository(self.db, Todo)

        total_users = await users.count([], tenant_id)
        active_users = await users.count([User.is_active.is_(True)], tenant_id)
        total_todos = await todos.count([], tenant_id)
        completed_todos = await todos.count(
            [Todo.status == TodoStatus.COMPLETED], tenant_id
        )

        return TenantStatistics(
            tenant_id=tenant_id,
            users=UserCounts(total=total_users, active=active_users),
            todos=TodoCounts(
                total=total_todos,
                completed=completed_todos,
                completion_rate=(
                    round(completed_todos / total_todos * 100, 2) if total_todos else 0.0
                ),
            ),
        )

    async def _ensure_subdomain_available(self, subdomain: str) -> None:
        if await self.repo.get_by_subdomain(subdomain):
            raise ConflictError(
                "Subdomain already exists",
                error_code="subdomain_exists",
                details={"subdomain": subdomain},
            )

    async def _invalidate(self, *subdomains: str) -> None:
        """Commit, then drop the cached entries for ``subdomains``."""
        await self.db.commit()
        if self.cache is not None:
            await self.cache.invalidate(*set(subdomains))


# Type alias for dependency injection
TenantSvc = Annotated[TenantService, Depends(TenantService)]
