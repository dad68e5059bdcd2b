"""Integration tests for profile and user administration endpoints."""

import pytest
from httpx import AsyncClient

from tests.factories.clients import client_for
from tests.factories.records import TEST_PASSWORD, token_for
from todolist.core.auth.backend import create_access_token
from todolist.modules.users.models import Role


pytestmark = pytest.mark.integration


class TestProfile:
    async def test_update_name_and_email(self, auth_client: AsyncClient):
        response = await auth_client.patch(
            "/api/v1/users/me", json={"name": "Alice Liddell", "email": "Liddell@Example.com"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Alice Liddell"
        assert response.json()["email"] == "liddell@example.com"

    async def test_email_taken_in_tenant(self, auth_client, admin):
        response = await auth_client.patch("/api/v1/users/me", json={"email": admin.email})

        assert response.status_code == 409

    async def test_email_used_in_other_tenant_is_fine(self, auth_client, other_user):
        response = await auth_client.patch(
            "/api/v1/users/me", json={"email": other_user.email}
        )

        assert response.status_code == 200

    async def test_change_password(self, auth_client, client, user):
        changed = await auth_client.post(
            "/api/v1/users/me/password",
            json={"current_password": TEST_PASSWORD, "new_password": "Changed2@pass"},
        )
        old_login = await client.post(
            "/api/v1/auth/login", json={"email": user.email, "password": TEST_PASSWORD}
        )
        new_login = await client.post(
            "/api/v1/auth/login", json={"email": user.email, "password": "Changed2@pass"}
        )

        assert changed.status_code == 204
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    async def test_wrong_current_password(self, auth_client):
        response = await auth_client.post(
            "/api/v1/users/me/password",
            json={"current_password": "Nope1!nope", "new_password": "Changed2@pass"},
        )

        assert response.status_code == 422
        assert response.json()["title"] == "Invalid Password"


class TestUserAdministration:
    async def test_admin_lists_only_own_tenant(self, admin_client, user, other_user):
        response = await admin_client.get("/api/v1/users")

        assert response.status_code == 200
        emails = sorted(u["email"] for u in response.json()["data"])
        assert emails == ["admin@example.com", "alice@example.com"]

    async def test_filter_by_role(self, admin_client, user):
        response = await admin_client.get("/api/v1/users", params={"role": "ADMIN"})

        assert [u["email"] for u in response.json()["data"]] == ["admin@example.com"]

    async def test_regular_user_is_refused(self, auth_client):
        response = await auth_client.get("/api/v1/users")

        assert response.status_code == 403
        assert response.json()["title"] == "Insufficient Role"

    async def test_deactivate_user(self, admin_client, app, user):
        response = await admin_client.patch(
            f"/api/v1/users/{user.id}/status", json={"is_active": False}
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        async with client_for(app, "acme.localhost", token_for(user)) as c:
            locked_out = await c.get("/api/v1/auth/me")
        assert locked_out.status_code == 401

    async def test_cannot_change_own_status(self, admin_client, admin):
        response = await admin_client.patch(
            f"/api/v1/users/{admin.id}/status", json={"is_active": False}
        )

        assert response.status_code == 422

    async def test_cannot_reach_other_tenant_user(self, admin_client, other_user):
        response = await admin_client.patch(
            f"/api/v1/users/{other_user.id}/status", json={"is_active": False}
        )

        assert response.status_code == 404

    async def test_role_claim_is_not_trusted(self, app, user):
        forged = create_access_token(user.id, user.tenant_id, Role.ADMIN)

        async with client_for(app, "acme.localhost", forged) as c:
            response = await c.get("/api/v1/users")

        assert response.status_code == 403
