"""Integration tests for multi-tenancy isolation.

These tests verify that tenant isolation is properly enforced
and users cannot reach data from other tenants, whatever host or
identifier they try.
"""

import pytest
from httpx import AsyncClient

from tests.factories.clients import client_for
from tests.factories.records import add_list, add_tenant, add_todo, add_user, token_for


pytestmark = pytest.mark.integration


class TestTenantResolution:
    async def test_unknown_subdomain_is_not_found(self, app, tenant):
        async with client_for(app, "nosuch.localhost") as c:
            response = await c.post(
                "/api/v1/auth/login",
                json={"email": "a@example.com", "password": "Password1!"},
            )

        assert response.status_code == 404
        assert response.json()["title"] == "Tenant Not Found"

    async def test_inactive_tenant_is_not_found(self, app, database):
        await add_tenant(database, "dormant", is_active=False)

        async with client_for(app, "dormant.localhost") as c:
            response = await c.get("/api/v1/auth/me")

        assert response.status_code == 404

    async def test_host_port_is_ignored(self, app, user):
        async with client_for(app, "acme.localhost:8000", token_for(user)) as c:
            response = await c.get("/api/v1/auth/me")

        assert response.status_code == 200

    async def test_subdomain_is_case_insensitive(self, app, user):
        async with client_for(app, "ACME.localhost", token_for(user)) as c:
            response = await c.get("/api/v1/auth/me")

        assert response.status_code == 200


class TestAccessGuard:
    async def test_token_from_other_tenant_is_rejected(self, app, tenant, other_user):
        async with client_for(app, "acme.localhost", token_for(other_user)) as c:
            response = await c.get("/api/v1/todos")

        assert response.status_code == 403
        assert response.json()["title"] == "Tenant Mismatch"

    async def test_main_domain_serves_users_own_tenant(self, app, database, user, other_user):
        await add_todo(database, user, "alice's")
        await add_todo(database, other_user, "bob's")

        async with client_for(app, "localhost", token_for(user)) as c:
            response = await c.get("/api/v1/todos")

        assert response.status_code == 200
        assert [t["title"] for t in response.json()["data"]] == ["alice's"]

    async def test_deactivated_user_is_rejected(self, app, database, tenant):
        ghost = await add_user(database, tenant, "ghost@example.com", is_active=False)

        async with client_for(app, "acme.localhost", token_for(ghost)) as c:
            response = await c.get("/api/v1/todos")

        assert response.status_code == 401


class TestCrossTenantData:
    """Identifiers from another tenant behave as if they did not exist."""

    @pytest.fixture
    async def bobs_todo(self, database, other_user):
        return await add_todo(database, other_user, "globex secret")

    async def test_read(self, auth_client: AsyncClient, bobs_todo):
        response = await auth_client.get(f"/api/v1/todos/{bobs_todo.id}")

        assert response.status_code == 404

    async def test_update(self, auth_client, bobs_todo):
        response = await auth_client.patch(
            f"/api/v1/todos/{bobs_todo.id}", json={"title": "hijacked"}
        )

        assert response.status_code == 404

    async def test_delete(self, auth_client, bobs_todo, app, other_user):
        response = await auth_client.delete(f"/api/v1/todos/{bobs_todo.id}")
        assert response.status_code == 404

        async with client_for(app, "globex.localhost", token_for(other_user)) as globex:
            still_there = await globex.get(f"/api/v1/todos/{bobs_todo.id}")
        assert still_there.json()["title"] == "globex secret"

    async def test_status_change(self, auth_client, bobs_todo):
        response = await auth_client.patch(
            f"/api/v1/todos/{bobs_todo.id}/status", json={"status": "COMPLETED"}
        )

        assert response.status_code == 404

    async def test_listing_never_leaks(self, auth_client, bobs_todo):
        response = await auth_client.get("/api/v1/todos", params={"search": "secret"})

        assert response.json()["data"] == []
        assert response.json()["pagination"]["total"] == 0

    async def test_move_into_foreign_list(self, auth_client, database, user, other_user):
        mine = await add_todo(database, user)
        foreign_list = await add_list(database, other_user)

        response = await auth_client.patch(
            f"/api/v1/todos/{mine.id}/move", json={"list_id": str(foreign_list.id)}
        )

        assert response.status_code == 404

    async def test_foreign_list_contents(self, auth_client, database, other_user):
        foreign_list = await add_list(database, other_user)

        response = await auth_client.get(f"/api/v1/lists/{foreign_list.id}/todos")

        assert response.status_code == 404


class TestSameTenantOwnership:
    async def test_colleague_gets_forbidden(self, app, database, tenant, user):
        colleague = await add_user(database, tenant, "carol@example.com")
        todo = await add_todo(database, colleague)

        async with client_for(app, "acme.localhost", token_for(user)) as c:
            read = await c.get(f"/api/v1/todos/{todo.id}")
            delete = await c.delete(f"/api/v1/todos/{todo.id}")

        assert read.status_code == 403
        assert read.json()["title"] == "Not Owner"
        assert delete.status_code == 403

    async def test_colleague_todos_not_listed(self, app, database, tenant, auth_client):
        colleague = await add_user(database, tenant, "carol@example.com")
        await add_todo(database, colleague, "carol's")

        response = await auth_client.get("/api/v1/todos")

        assert response.json()["data"] == []
