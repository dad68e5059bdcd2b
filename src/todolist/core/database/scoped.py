"""Tenant-scoped data access.

``TenantScopedRepository`` is the single place where a tenant constraint
is added to a query. Entity repositories hold one as a collaborator and
never build unscoped statements for tenant-owned models themselves.

Scope argument:
    UUID          filter (and stamp on create) by this tenant
    None          only for models without a ``tenant_id`` column (Tenant)
    SYSTEM_SCOPE  explicit unfiltered access to a tenant-owned model,
                  reserved for identity lookups before the tenant is checked
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from todolist.core.errors import NotFoundError, ValidationError


ModelT = TypeVar("ModelT")

# Columns that an update may never rewrite
PROTECTED_FIELDS = frozenset({"id", "tenant_id", "created_at", "updated_at"})


class TenantContextRequired(Exception):
    """Raised when a tenant-owned model is queried without a tenant scope."""

    def __init__(self, message: str = "Tenant context is required for this operation"):
        self.message = message
        super().__init__(self.message)


class _SystemScope:
    __slots__ = ()

    def __repr__(self) -> str:
        return "SYSTEM_SCOPE"


SYSTEM_SCOPE = _SystemScope()

TenantScope = UUID | _SystemScope | None


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata. Pages are 1-based."""

    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)


@dataclass
class Page(Generic[ModelT]):
    """One page of results plus accurate metadata."""

    data: list[ModelT]
    pagination: Pagination


def icontains(column: InstrumentedAttribute[Any], term: str) -> ColumnElement[bool]:
    """Case-insensitive substring predicate with LIKE wildcards escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


class TenantScopedRepository(Generic[ModelT]):
    """Generic tenant-scoped CRUD over one model.

    Usage:
        todos = TenantScopedRepository(session, Todo)
        todo = await todos.find_by_id(todo_id, tenant_id)
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model
        self.resource = model.__name__.lower()
        self.tenant_column: InstrumentedAttribute[UUID] | None = getattr(
            model, "tenant_id", None
        )

    @property
    def is_tenant_owned(self) -> bool:
        return self.tenant_column is not None

    def _scoped(
        self,
        where: Sequence[ColumnElement[bool]],
        tenant_id: TenantScope,
    ) -> list[ColumnElement[bool]]:
        """Return ``where`` plus the tenant constraint for this scope."""
        criteria = list(where)
        if self.tenant_column is None:
            return criteria
        if tenant_id is None:
            raise TenantContextRequired(
                f"A tenant scope is required to access {self.resource}"
            )
        if isinstance(tenant_id, _SystemScope):
            return criteria
        criteria.append(self.tenant_column == tenant_id)
        return criteria

    async def find_by_id(
        self,
        id: UUID,
        tenant_id: TenantScope,
        *,
        options: Sequence[Any] = (),
    ) -> ModelT | None:
        """Find one row by primary key within the scope."""
        return await self.find_one(
            [self.model.id == id],  # type: ignore[attr-defined]
            tenant_id,
            options=options,
        )

    async def find_one(
        self,
        where: Sequence[ColumnElement[bool]],
        tenant_id: TenantScope,
        *,
        options: Sequence[Any] = (),
    ) -> ModelT | None:
        """Find the first row matching ``where`` within the scope."""
        stmt = select(self.model).where(*self._scoped(where, tenant_id))
        if options:
            stmt = stmt.options(*options)
        result = await self.session.execute(stmt.limit(1))
        return result.scalars().first()

    async def find_many(
        self,
        where: Sequence[ColumnElement[bool]],
        tenant_id: TenantScope,
        *,
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        options: Sequence[Any] = (),
    ) -> list[ModelT]:
        """Find all rows matching ``where`` within the scope."""
        stmt = select(self.model).where(*self._scoped(where, tenant_id))
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        if options:
            stmt = stmt.options(*options)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(
        self,
        where: Sequence[ColumnElement[bool]],
        tenant_id: TenantScope,
    ) -> int:
        """Count rows matching ``where`` within the scope."""
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(*self._scoped(where, tenant_id))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def find_paginated(
        self,
        where: Sequence[ColumnElement[bool]],
        tenant_id: TenantScope,
        page: int = 1,
        page_size: int = 10,
        *,
        order_by: Sequence[Any] = (),
        options: Sequence[Any] = (),
    ) -> Page[ModelT]:
        """Return one page of rows plus pagination metadata.

        A page past the end yields an empty ``data`` list with accurate
        totals rather than an error.
        """
        if page < 1 or page_size < 1:
            raise ValidationError(
                "Invalid pagination parameters",
                errors=[
                    {"field": "page", "message": "Must be >= 1"},
                    {"field": "page_size", "message": "Must be >= 1"},
                ],
            )

        criteria = self._scoped(where, tenant_id)

        count_stmt = select(func.count()).select_from(self.model).where(*criteria)
        total = int((await self.session.execute(count_stmt)).scalar_one())

        stmt = (
            select(self.model)
            .where(*criteria)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        if order_by:
            stmt = stmt.order_by(*order_by)
        if options:
            stmt = stmt.options(*options)
        result = await self.session.execute(stmt)

        return Page(
            data=list(result.scalars().all()),
            pagination=Pagination(total=total, page=page, page_size=page_size),
        )

    async def create(self, data: dict[str, Any], tenant_id: TenantScope) -> ModelT:
        """Insert a row, stamping the tenant for tenant-owned models."""
        values = dict(data)
        if self.is_tenant_owned:
            if not isinstance(tenant_id, UUID):
                raise TenantContextRequired(
                    f"A concrete tenant is required to create {self.resource}"
                )
            values["tenant_id"] = tenant_id

        instance = self.model(**values)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(
        self,
        id: UUID,
        data: dict[str, Any],
        tenant_id: TenantScope,
    ) -> ModelT:
        """Update a row after re-reading it within the scope.

        Raises:
            NotFoundError: If the row is missing or belongs to another tenant
        """
        instance = await self._get_or_raise(id, tenant_id)
        for key, value in data.items():
            if key in PROTECTED_FIELDS:
                continue
            setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: UUID, tenant_id: TenantScope) -> None:
        """Delete a row after re-reading it within the scope.

        Raises:
            NotFoundError: If the row is missing or belongs to another tenant
        """
        instance = await self._get_or_raise(id, tenant_id)
        await self.session.delete(instance)
        await self.session.flush()

    async def _get_or_raise(self, id: UUID, tenant_id: TenantScope) -> ModelT:
        instance = await self.find_by_id(id, tenant_id)
        if instance is None:
            raise NotFoundError(
                f"{self.model.__name__} not found",
                resource=self.resource,
                resource_id=str(id),
            )
        return instance
