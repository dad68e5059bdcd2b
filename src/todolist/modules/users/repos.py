"""User repository for database operations."""

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import or_

from todolist.api.dependencies import DBSession
from todolist.core.database import (
    SYSTEM_SCOPE,
    Page,
    TenantScopedRepository,
    icontains,
)
from todolist.modules.users.models import Role, User


class UserRepository:
    """Repository for User database operations.

    Every query goes through TenantScopedRepository with the caller's
    tenant. ``get_by_id_system`` is the one unfiltered lookup, used by the
    access guard to load a token's subject before the tenant is checked.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session
        self.records = TenantScopedRepository(session, User)

    async def create(self, data: dict[str, Any], tenant_id: UUID) -> User:
        """Create a user in the given tenant.

        Args:
            data: Column values; tenant_id is stamped by the scoped repository
            tenant_id: The owning tenant

        Returns:
            The created user with ID populated
        """
        return await self.records.create(data, tenant_id)

    async def get_by_id(self, user_id: UUID, tenant_id: UUID) -> User | None:
        return await self.records.find_by_id(user_id, tenant_id)

    async def get_by_id_system(self, user_id: UUID) -> User | None:
        """Get a user by ID without tenant filtering.

        Only the access guard may call this; it compares the user's tenant
        with the resolved tenant right after.
        """
        return await self.records.find_by_id(user_id, SYSTEM_SCOPE)

    async def get_by_email(self, email: str, tenant_id: UUID) -> User | None:
        """Get a user by email address within a tenant.

        Args:
            email: The email, compared lowercased
            tenant_id: The tenant scope

        Returns:
            User if found, None otherwise
        """
        return await self.records.find_one([User.email == email.lower()], tenant_id)

    async def list_paginated(
        self,
        tenant_id: UUID,
        *,
        search: str | None = None,
        role: Role | None = None,
        is_active: bool | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[User]:
        """List users for a tenant with optional filters and pagination."""
        where = []
        if search:
            where.append(or_(icontains(User.name, search), icontains(User.email, search)))
        if role is not None:
            where.append(User.role == role)
        if is_active is not None:
            where.append(User.is_active.is_(is_active))

        return await self.records.find_paginated(
            where,
            tenant_id,
            page,
            page_size,
            order_by=[User.created_at.desc()],
        )

    async def count(self, tenant_id: UUID, *, is_active: bool | None = None) -> int:
        where = [] if is_active is None else [User.is_active.is_(is_active)]
        return await self.records.count(where, tenant_id)

    async def update(self, user_id: UUID, data: dict[str, Any], tenant_id: UUID) -> User:
        """Update a user.

        Raises:
            NotFoundError: If the user is not in the tenant
        """
        return await self.records.update(user_id, data, tenant_id)


# Type alias for dependency injection
UserRepo = Annotated[UserRepository, Depends(UserRepository)]
