"""Tenant resolution: hostname -> tenant context."""

from todolist.core.tenancy.cache import OptionalTenantCache, TenantCache, get_tenant_cache
from todolist.core.tenancy.context import (
    MAIN_DOMAIN_CONTEXT,
    TenantContext,
    TenantInfo,
    get_tenant_context,
)
from todolist.core.tenancy.middleware import TenantResolutionMiddleware
from todolist.core.tenancy.resolver import (
    TenantDirectory,
    TenantResolver,
    extract_subdomain,
    is_valid_subdomain,
    normalize_host,
)


__all__ = [
    "MAIN_DOMAIN_CONTEXT",
    "OptionalTenantCache",
    "TenantCache",
    "TenantContext",
    "TenantDirectory",
    "TenantInfo",
    "TenantResolutionMiddleware",
    "TenantResolver",
    "extract_subdomain",
    "get_tenant_cache",
    "get_tenant_context",
    "is_valid_subdomain",
    "normalize_host",
]
