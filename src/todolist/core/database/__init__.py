"""Database layer - store handle, base models, mixins and tenant-scoped access."""

from todolist.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin, utcnow
from todolist.core.database.scoped import (
    SYSTEM_SCOPE,
    Page,
    Pagination,
    TenantContextRequired,
    TenantScope,
    TenantScopedRepository,
    icontains,
)
from todolist.core.database.session import Database, get_database, get_db


__all__ = [
    "SYSTEM_SCOPE",
    "Base",
    "Database",
    "Page",
    "Pagination",
    "TenantContextRequired",
    "TenantMixin",
    "TenantScope",
    "TenantScopedRepository",
    "TimestampMixin",
    "UUIDMixin",
    "get_database",
    "get_db",
    "icontains",
    "utcnow",
]
