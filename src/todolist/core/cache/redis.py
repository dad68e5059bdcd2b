"""Redis connection pool and a small JSON cache on top of it.

The pool is created lazily on first use and closed by the application
lifespan. Callers see ``redis.exceptions.RedisError`` when Redis is down
and decide for themselves whether that is fatal.
"""

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from todolist.config import settings


_pool: ConnectionPool | None = None


def get_pool() -> ConnectionPool:
    """Return the process-wide pool, creating it from settings on first use."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(
            str(settings.redis_url),
            max_connections=settings.redis_max_connections,
            decode_responses=True,
        )
    return _pool


@asynccontextmanager
async def redis_client() -> AsyncGenerator[redis.Redis, None]:  # type: ignore[type-arg]
    """Borrow a client bound to the shared pool."""
    client = redis.Redis(connection_pool=get_pool())
    try:
        yield client
    finally:
        await client.aclose()


async def close_redis_pool() -> None:
    """Disconnect the pool. Safe to call when it was never created."""
    global _pool
    if _pool is None:
        return
    await _pool.disconnect()
    _pool = None


class RedisCache:
    """JSON documents stored under a common key prefix.

    Args:
        prefix: Prepended to every key, e.g. ``"tenant:subdomain:"``
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix

    def key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    async def get_json(self, name: str) -> dict[str, Any] | None:
        async with redis_client() as client:
            raw = await client.get(self.key(name))
        return json.loads(raw) if raw else None

    async def set_json(
        self,
        name: str,
        value: dict[str, Any],
        ttl_seconds: int | None = None,
    ) -> None:
        """Store ``value``; it expires after ``ttl_seconds`` when given."""
        async with redis_client() as client:
            await client.set(self.key(name), json.dumps(value), ex=ttl_seconds or None)

    async def delete(self, *names: str) -> int:
        """Remove keys in one round trip and return how many existed."""
        if not names:
            return 0
        async with redis_client() as client:
            return await client.delete(*(self.key(n) for n in names))

    async def ping(self) -> None:
        """Round trip to Redis; raises RedisError when it is unreachable."""
        async with redis_client() as client:
            await client.ping()
