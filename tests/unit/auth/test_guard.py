"""Unit tests for the access guard."""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from todolist.core.auth.backend import (
    create_access_token,
    create_password_reset_token,
    create_refresh_token,
)
from todolist.core.auth.guard import AccessGuard
from todolist.core.errors import ForbiddenError, UnauthorizedError
from todolist.core.tenancy.context import TenantContext, TenantInfo
from todolist.modules.users.models import Role


def make_user(tenant_id, *, role=Role.USER, is_active=True):
    return SimpleNamespace(id=uuid4(), tenant_id=tenant_id, role=role, is_active=is_active)


def tenant_context(tenant_id) -> TenantContext:
    return TenantContext(
        is_main_domain=False,
        tenant=TenantInfo(id=tenant_id, name="Acme", subdomain="acme"),
    )


@pytest.fixture
def users() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def guard(users: AsyncMock) -> AccessGuard:
    return AccessGuard(users)


class TestAuthenticate:
    """Tests for AccessGuard.authenticate."""

    async def test_accepts_user_of_resolved_tenant(self, guard, users):
        tenant_id = uuid4()
        user = make_user(tenant_id)
        users.get_by_id_system.return_value = user

        auth = await guard.authenticate(
            tenant_context(tenant_id),
            create_access_token(user.id, tenant_id, user.role),
        )

        assert auth.user is user
        assert auth.user_id == user.id
        assert auth.tenant_id == tenant_id
        assert auth.is_admin is False
        users.get_by_id_system.assert_awaited_once_with(user.id)

    async def test_missing_credential_is_unauthorized(self, guard, users):
        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(tenant_context(uuid4()), None)

        assert exc_info.value.error_code == "missing_token"
        users.get_by_id_system.assert_not_awaited()

    async def test_expired_credential_is_unauthorized(self, guard):
        tenant_id = uuid4()
        token = create_access_token(
            uuid4(), tenant_id, Role.USER, expires_delta=timedelta(seconds=-5)
        )

        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(tenant_context(tenant_id), token)

        assert exc_info.value.error_code == "token_expired"

    async def test_malformed_credential_is_unauthorized(self, guard):
        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(tenant_context(uuid4()), "garbage")

        assert exc_info.value.error_code == "invalid_token"

    async def test_refresh_token_rejected_as_access(self, guard, users):
        tenant_id = uuid4()
        user = make_user(tenant_id)
        users.get_by_id_system.return_value = user

        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(
                tenant_context(tenant_id),
                create_refresh_token(user.id, tenant_id, user.role),
            )

        assert exc_info.value.error_code == "invalid_token_type"

    async def test_reset_token_rejected_as_access(self, guard):
        tenant_id = uuid4()

        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(
                tenant_context(tenant_id),
                create_password_reset_token(uuid4(), tenant_id, "hash"),
            )

        assert exc_info.value.error_code == "invalid_token_type"

    async def test_refresh_token_accepted_when_expected(self, guard, users):
        tenant_id = uuid4()
        user = make_user(tenant_id)
        users.get_by_id_system.return_value = user

        auth = await guard.authenticate(
            tenant_context(tenant_id),
            create_refresh_token(user.id, tenant_id, user.role),
            token_type="refresh",
        )

        assert auth.token.type == "refresh"

    async def test_unknown_user_is_unauthorized(self, guard, users):
        tenant_id = uuid4()
        users.get_by_id_system.return_value = None

        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(
                tenant_context(tenant_id),
                create_access_token(uuid4(), tenant_id, Role.USER),
            )

        assert exc_info.value.error_code == "user_invalid"

    async def test_inactive_user_is_unauthorized(self, guard, users):
        tenant_id = uuid4()
        user = make_user(tenant_id, is_active=False)
        users.get_by_id_system.return_value = user

        with pytest.raises(UnauthorizedError):
            await guard.authenticate(
                tenant_context(tenant_id),
                create_access_token(user.id, tenant_id, user.role),
            )

    async def test_tenant_claim_must_match_user(self, guard, users):
        """A token claiming a tenant the user does not belong to is invalid."""
        tenant_id = uuid4()
        user = make_user(tenant_id)
        users.get_by_id_system.return_value = user

        with pytest.raises(UnauthorizedError) as exc_info:
            await guard.authenticate(
                tenant_context(tenant_id),
                create_access_token(user.id, uuid4(), user.role),
            )

        assert exc_info.value.error_code == "invalid_token"

    async def test_user_of_other_tenant_is_forbidden(self, guard, users):
        """Valid credential, wrong tenant host: 403, not 401."""
        own_tenant = uuid4()
        user = make_user(own_tenant)
        users.get_by_id_system.return_value = user

        with pytest.raises(ForbiddenError) as exc_info:
            await guard.authenticate(
                tenant_context(uuid4()),
                create_access_token(user.id, own_tenant, user.role),
            )

        assert exc_info.value.error_code == "tenant_mismatch"

    async def test_main_domain_skips_tenant_match(self, guard, users):
        tenant_id = uuid4()
        user = make_user(tenant_id)
        users.get_by_id_system.return_value = user

        auth = await guard.authenticate(
            TenantContext(is_main_domain=True),
            create_access_token(user.id, tenant_id, user.role),
        )

        assert auth.tenant_id == tenant_id
        assert auth.tenant_context.tenant is None


class TestTryAuthenticate:
    async def test_returns_none_without_credential(self, guard):
        assert await guard.try_authenticate(tenant_context(uuid4()), None) is None

    async def test_returns_none_on_failure(self, guard):
        assert await guard.try_authenticate(tenant_context(uuid4()), "garbage") is None


class TestRequireRole:
    def test_allows_listed_role(self):
        auth = SimpleNamespace(user_id=uuid4(), role=Role.ADMIN)

        assert AccessGuard.require_role(auth, [Role.ADMIN]) is auth

    def test_rejects_other_role(self):
        auth = SimpleNamespace(user_id=uuid4(), role=Role.USER)

        with pytest.raises(ForbiddenError) as exc_info:
            AccessGuard.require_role(auth, [Role.ADMIN])

        assert exc_info.value.error_code == "insufficient_role"
        assert exc_info.value.details["required_roles"] == ["ADMIN"]
