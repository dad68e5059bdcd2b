"""Integration tests for TenantScopedRepository against a real engine."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories.records import add_tenant, add_todo, add_user
from todolist.core.database import (
    SYSTEM_SCOPE,
    Database,
    TenantContextRequired,
    TenantScopedRepository,
)
from todolist.core.errors import NotFoundError, ValidationError
from todolist.modules.tenants.models import Tenant
from todolist.modules.todos.models import Todo, TodoStatus
from todolist.modules.users.models import User


pytestmark = pytest.mark.integration


@pytest.fixture
async def two_tenants(database: Database):
    acme = await add_tenant(database, "acme")
    globex = await add_tenant(database, "globex")
    alice = await add_user(database, acme, "alice@example.com")
    bob = await add_user(database, globex, "bob@example.com")
    return acme, globex, alice, bob


class TestTenantFilter:
    async def test_find_by_id_is_scoped(self, db: AsyncSession, database, two_tenants):
        acme, globex, alice, _ = two_tenants
        todo = await add_todo(database, alice)
        todos = TenantScopedRepository(db, Todo)

        assert (await todos.find_by_id(todo.id, acme.id)).id == todo.id
        assert await todos.find_by_id(todo.id, globex.id) is None

    async def test_find_many_and_count_are_scoped(self, db, database, two_tenants):
        acme, globex, alice, bob = two_tenants
        await add_todo(database, alice, "a1")
        await add_todo(database, alice, "a2")
        await add_todo(database, bob, "b1")
        todos = TenantScopedRepository(db, Todo)

        acme_todos = await todos.find_many([], acme.id)

        assert sorted(t.title for t in acme_todos) == ["a1", "a2"]
        assert await todos.count([], acme.id) == 2
        assert await todos.count([], globex.id) == 1

    async def test_extra_criteria_combine_with_tenant(self, db, database, two_tenants):
        acme, _, alice, _ = two_tenants
        await add_todo(database, alice, "open")
        await add_todo(database, alice, "done", status=TodoStatus.COMPLETED)
        todos = TenantScopedRepository(db, Todo)

        assert await todos.count([Todo.status == TodoStatus.COMPLETED], acme.id) == 1

    async def test_missing_scope_for_owned_model_raises(self, db, two_tenants):
        todos = TenantScopedRepository(db, Todo)

        with pytest.raises(TenantContextRequired):
            await todos.find_many([], None)

    async def test_system_scope_reads_across_tenants(self, db, two_tenants):
        _, _, alice, bob = two_tenants
        users = TenantScopedRepository(db, User)

        assert (await users.find_by_id(bob.id, SYSTEM_SCOPE)).email == "bob@example.com"
        assert await users.count([], SYSTEM_SCOPE) == 2

    async def test_unowned_model_needs_no_scope(self, db, two_tenants):
        tenants = TenantScopedRepository(db, Tenant)

        assert await tenants.count([], None) == 2


class TestWrites:
    async def test_create_stamps_tenant(self, db, two_tenants):
        acme, _, alice, _ = two_tenants
        todos = TenantScopedRepository(db, Todo)

        todo = await todos.create(
            {"title": "stamped", "user_id": alice.id, "tenant_id": None}, acme.id
        )

        assert todo.tenant_id == acme.id

    async def test_create_requires_concrete_tenant(self, db, two_tenants):
        _, _, alice, _ = two_tenants
        todos = TenantScopedRepository(db, Todo)

        with pytest.raises(TenantContextRequired):
            await todos.create({"title": "x", "user_id": alice.id}, SYSTEM_SCOPE)

    async def test_update_cannot_rewrite_tenant(self, db, database, two_tenants):
        acme, globex, alice, _ = two_tenants
        todo = await add_todo(database, alice)
        todos = TenantScopedRepository(db, Todo)

        updated = await todos.update(
            todo.id, {"title": "renamed", "tenant_id": globex.id}, acme.id
        )

        assert updated.title == "renamed"
        assert updated.tenant_id == acme.id

    async def test_update_in_other_tenant_is_not_found(self, db, database, two_tenants):
        _, globex, alice, _ = two_tenants
        todo = await add_todo(database, alice)
        todos = TenantScopedRepository(db, Todo)

        with pytest.raises(NotFoundError):
            await todos.update(todo.id, {"title": "hijacked"}, globex.id)

    async def test_delete_in_other_tenant_is_not_found(self, db, database, two_tenants):
        acme, globex, alice, _ = two_tenants
        todo = await add_todo(database, alice)
        todos = TenantScopedRepository(db, Todo)

        with pytest.raises(NotFoundError):
            await todos.delete(todo.id, globex.id)

        await todos.delete(todo.id, acme.id)
        assert await todos.find_by_id(todo.id, acme.id) is None


class TestPagination:
    async def test_pages_and_totals(self, db, database, two_tenants):
        acme, _, alice, _ = two_tenants
        for i in range(5):
            await add_todo(database, alice, f"todo {i}")
        todos = TenantScopedRepository(db, Todo)

        page = await todos.find_paginated([], acme.id, page=2, page_size=2)

        assert len(page.data) == 2
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3

    async def test_page_past_end_is_empty(self, db, database, two_tenants):
        acme, _, alice, _ = two_tenants
        await add_todo(database, alice)
        todos = TenantScopedRepository(db, Todo)

        page = await todos.find_paginated([], acme.id, page=9, page_size=10)

        assert page.data == []
        assert page.pagination.total == 1

    @pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0)])
    async def test_invalid_parameters(self, db, two_tenants, page, page_size):
        acme = two_tenants[0]
        todos = TenantScopedRepository(db, Todo)

        with pytest.raises(ValidationError):
            await todos.find_paginated([], acme.id, page=page, page_size=page_size)
