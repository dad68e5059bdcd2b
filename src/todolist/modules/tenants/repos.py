"""Tenant repository for database operations.

Tenants are the root entity and are never tenant-filtered; every call
passes ``None`` as the scope. The repository doubles as the tenant
directory consulted by TenantResolver.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_

from todolist.api.dependencies import DBSession
from todolist.core.database import Page, TenantScopedRepository, icontains
from todolist.core.tenancy.context import TenantInfo
from todolist.modules.tenants.models import Tenant


class TenantRepository:
    """Repository for Tenant database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session
        self.records = TenantScopedRepository(session, Tenant)

    # Tenant directory

    async def find_active_by_subdomain(self, subdomain: str) -> TenantInfo | None:
        tenant = await self.records.find_one(
            [Tenant.subdomain == subdomain, Tenant.is_active.is_(True)],
            None,
        )
        return TenantInfo.model_validate(tenant) if tenant else None

    async def find_first_active(self) -> TenantInfo | None:
        tenants = await self.records.find_many(
            [Tenant.is_active.is_(True)],
            None,
            order_by=[Tenant.created_at.asc()],
            limit=1,
        )
        return TenantInfo.model_validate(tenants[0]) if tenants else None

    # Administration

    async def get_by_id(self, tenant_id: UUID) -> Tenant | None:
        return await self.records.find_by_id(tenant_id, None)

    async def get_by_subdomain(self, subdomain: str) -> Tenant | None:
        """Get a tenant by subdomain regardless of its status."""
        return await self.records.find_one([Tenant.subdomain == subdomain], None)

    async def list_paginated(
        self,
        *,
        search: str | None = None,
        is_active: bool | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[Tenant]:
        """List tenants, optionally filtered by name/subdomain search and status."""
        where = []
        if search:
            where.append(or_(icontains(Tenant.name, search), icontains(Tenant.subdomain, search)))
        if is_active is not None:
            where.append(Tenant.is_active.is_(is_active))

        return await self.records.find_paginated(
            where,
            None,
            page,
            page_size,
            order_by=[Tenant.created_at.desc()],
        )

    async def list_all(self) -> list[Tenant]:
        return await self.records.find_many([], None, order_by=[Tenant.created_at.asc()])

    async def create(self, data: dict[str, Any]) -> Tenant:
        return await self.records.create(data, None)

    async def update(self, tenant_id: UUID, data: dict[str, Any]) -> Tenant:
        return await self.records.update(tenant_id, data, None)


# Type alias for dependency injection
TenantRepo = Annotated[TenantRepository, Depends(TenantRepository)]
