"""Bounded cache for tenant directory lookups.

Only positive lookups of active tenants are cached, each for at most
``ttl_seconds``. Tenant updates and status changes invalidate the entry
once committed, so later lookups on every node read the new row. A lookup
that raced the commit can re-cache the old row, but never past the TTL.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from redis.exceptions import RedisError

from todolist.core.cache.redis import RedisCache
from todolist.core.constants import TENANT_CACHE_PREFIX
from todolist.core.tenancy.context import TenantInfo


logger = structlog.get_logger()


class TenantCache:
    """Redis-backed subdomain -> TenantInfo cache.

    Redis failures are logged and treated as misses; the directory stays
    the source of truth.
    """

    def __init__(self, ttl_seconds: int, cache: RedisCache | None = None) -> None:
        self.ttl_seconds = ttl_seconds
        self.cache = cache or RedisCache(prefix=TENANT_CACHE_PREFIX)

    async def get(self, subdomain: str) -> TenantInfo | None:
        try:
            data = await self.cache.get_json(subdomain)
        except RedisError as e:
            logger.warning("tenant_cache_unavailable", operation="get", error=str(e))
            return None
        if data is None:
            return None
        return TenantInfo.model_validate(data)

    async def set(self, tenant: TenantInfo) -> None:
        try:
            await self.cache.set_json(
                tenant.subdomain,
                tenant.model_dump(mode="json"),
                ttl_seconds=self.ttl_seconds,
            )
        except RedisError as e:
            logger.warning("tenant_cache_unavailable", operation="set", error=str(e))

    async def ping(self) -> None:
        await self.cache.ping()

    async def invalidate(self, *subdomains: str) -> None:
        try:
            await self.cache.delete(*subdomains)
        except RedisError as e:
            logger.warning(
                "tenant_cache_unavailable",
                operation="invalidate",
                subdomains=list(subdomains),
                error=str(e),
            )


def get_tenant_cache(request: Request) -> TenantCache | None:
    """Return the application's tenant cache, or None when caching is disabled."""
    return getattr(request.app.state, "tenant_cache", None)


OptionalTenantCache = Annotated[TenantCache | None, Depends(get_tenant_cache)]
