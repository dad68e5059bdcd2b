"""Pytest configuration and shared fixtures."""

import os


# Settings are read once at import time; pin the test environment first.
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MAIN_DOMAIN"] = "localhost"
os.environ["TENANT_CACHE_TTL_SECONDS"] = "0"
os.environ["DEV_DEFAULT_TENANT"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tests.factories.clients import client_for  # noqa: E402
from tests.factories.records import add_tenant, add_user, token_for  # noqa: E402
from todolist.core.database import Database  # noqa: E402
from todolist.main import create_app  # noqa: E402
from todolist.modules.tenants.models import Tenant  # noqa: E402
from todolist.modules.users.models import Role, User  # noqa: E402


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """In-memory database with a fresh schema for each test.

    StaticPool keeps the single in-memory connection alive across sessions.
    """
    db = Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.create_schema()

    yield db

    await db.drop_schema()
    await db.shutdown()


@pytest.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data directly."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def app(database: Database) -> FastAPI:
    """Create test application instance bound to the test database."""
    return create_app(database=database)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client addressed to the acme tenant."""
    async with client_for(app, "acme.localhost") as c:
        yield c


@pytest.fixture
async def main_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client addressed to the main domain."""
    async with client_for(app, "localhost") as c:
        yield c


# ============================================================
# Tenant and User Fixtures
# ============================================================


@pytest.fixture
async def tenant(database: Database) -> Tenant:
    """The acme tenant, reachable at acme.localhost."""
    return await add_tenant(database, "acme", name="Acme Corp")


@pytest.fixture
async def other_tenant(database: Database) -> Tenant:
    """The globex tenant, reachable at globex.localhost."""
    return await add_tenant(database, "globex", name="Globex Inc")


@pytest.fixture
async def user(database: Database, tenant: Tenant) -> User:
    return await add_user(database, tenant, "alice@example.com", name="Alice")


@pytest.fixture
async def admin(database: Database, tenant: Tenant) -> User:
    return await add_user(
        database, tenant, "admin@example.com", role=Role.ADMIN, name="Admin"
    )


@pytest.fixture
async def other_user(database: Database, other_tenant: Tenant) -> User:
    return await add_user(database, other_tenant, "bob@example.com", name="Bob")


@pytest.fixture
async def auth_client(app: FastAPI, user: User) -> AsyncGenerator[AsyncClient, None]:
    """Client for ``user`` on their own tenant's host."""
    async with client_for(app, "acme.localhost", token_for(user)) as c:
        yield c


@pytest.fixture
async def admin_client(app: FastAPI, admin: User) -> AsyncGenerator[AsyncClient, None]:
    """Client for the acme administrator on the acme host."""
    async with client_for(app, "acme.localhost", token_for(admin)) as c:
        yield c
