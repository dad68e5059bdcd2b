"""Async database handle and session dependency.

The store client is an explicitly constructed ``Database`` owned by the
application (``app.state.database``). The FastAPI lifespan initializes it
on startup and shuts it down on termination.
"""

from collections.abc import AsyncGenerator
from typing import TYPE_CHECKING, Any

import structlog
from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todolist.core.database.base import Base


if TYPE_CHECKING:
    from todolist.config import Settings


logger = structlog.get_logger()


class Database:
    """Owns the async engine and session factory for one process."""

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Database":
        """Build the handle from application settings."""
        url = settings.async_database_url
        engine_kwargs: dict[str, Any] = {"echo": settings.database_echo}
        if url.startswith("postgresql"):
            engine_kwargs.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_pre_ping=True,  # Verify connections before use
            )
        return cls(url, **engine_kwargs)

    async def initialize(self) -> None:
        """Verify the store is reachable."""
        await self.ping()
        logger.info("database_initialized", dialect=self.engine.dialect.name)

    async def ping(self) -> None:
        """Run a trivial query against the store."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_schema(self) -> None:
        """Create all tables known to the metadata.

        Deployments use the migration scripts; this is for local setup and tests.
        """
        from todolist.modules import load_models  # noqa: PLC0415

        load_models()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        """Drop all tables known to the metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def shutdown(self) -> None:
        """Dispose of the engine and its connection pool."""
        await self.engine.dispose()
        logger.info("database_shutdown")

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


def get_database(request: Request) -> Database:
    """Return the application's database handle."""
    database: Database = request.app.state.database
    return database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session.

    Usage:
        @router.get("/items")
        async def list_items(db: DBSession):
            ...
    """
    async for session in get_database(request).session():
        yield session
