"""Authentication service for registration, login and credential management."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from todolist.config import settings
from todolist.core.auth.backend import (
    TokenError,
    create_access_token,
    create_password_reset_token,
    create_refresh_token,
    decode_token,
    hash_password,
    password_fingerprint,
    verify_password,
)
from todolist.core.auth.schemas import TokenPair
from todolist.core.constants import PASSWORD_RESET_PURPOSE
from todolist.core.errors import ConflictError, UnauthorizedError, ValidationError
from todolist.modules.users.models import Role, User
from todolist.modules.users.repos import UserRepo


logger = structlog.get_logger()


class AuthService:
    """Service for authentication operations.

    Every operation runs inside the tenant the request resolved to;
    emails are only unique per tenant.
    """

    def __init__(self, users: UserRepo) -> None:
        self.users = users

    async def register(
        self,
        email: str,
        password: str,
        name: str,
        tenant_id: UUID,
    ) -> tuple[User, TokenPair]:
        """Register a new user in a tenant.

        Args:
            email: Lowercased email address
            password: Plain text password
            name: Display name
            tenant_id: The tenant the request resolved to

        Returns:
            Tuple of (user, token_pair)

        Raises:
            ConflictError: If the email is already registered in this tenant
        """
        existing = await self.users.get_by_email(email, tenant_id)
        if existing:
            raise ConflictError(
                "Email already registered",
                error_code="email_exists",
                details={"email": email},
            )

        user = await self.users.create(
            {
                "email": email,
                "password_hash": hash_password(password),
                "name": name,
                "role": Role.USER,
            },
            tenant_id,
        )
        logger.info("user_registered", user_id=str(user.id), tenant_id=str(tenant_id))

        return user, self.issue_tokens(user)

    async def login(
        self,
        email: str,
        password: str,
        tenant_id: UUID,
    ) -> tuple[User, TokenPair]:
        """Authenticate a user with email and password within a tenant.

        Raises:
            UnauthorizedError: If credentials are invalid or the account is inactive
        """
        user = await self.users.get_by_email(email, tenant_id)
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed", tenant_id=str(tenant_id))
            raise UnauthorizedError(
                "Invalid email or password",
                error_code="invalid_credentials",
            )

        if not user.is_active:
            raise UnauthorizedError(
                "Account is deactivated",
                error_code="account_inactive",
            )

        logger.info("user_logged_in", user_id=str(user.id), tenant_id=str(tenant_id))
        return user, self.issue_tokens(user)

    def issue_tokens(self, user: User) -> TokenPair:
        """Create a new access/refresh pair for a user."""
        return TokenPair(
            access_token=create_access_token(user.id, user.tenant_id, user.role),
            refresh_token=create_refresh_token(user.id, user.tenant_id, user.role),
            expires_in=settings.access_token_expire_minutes * 60,
        )

    async def request_password_reset(self, email: str, tenant_id: UUID) -> str | None:
        """Issue a reset credential for an active user.

        Returns None for unknown or inactive accounts; callers must not
        reveal which case occurred.
        """
        user = await self.users.get_by_email(email, tenant_id)
        if not user or not user.is_active:
            logger.info("password_reset_requested", tenant_id=str(tenant_id), matched=False)
            return None

        logger.info(
            "password_reset_requested",
            tenant_id=str(tenant_id),
            user_id=str(user.id),
            matched=True,
        )
        return create_password_reset_token(user.id, user.tenant_id, user.password_hash)

    async def reset_password(self, token: str, new_password: str, tenant_id: UUID) -> None:
        """Set a new password using a reset credential.

        The credential must carry the password-reset purpose, belong to the
        current tenant and match the user's current password.

        Raises:
            ValidationError: If the reset credential is invalid, expired or used
        """
        invalid = ValidationError(
            "Invalid or expired reset token",
            error_code="invalid_reset_token",
        )

        try:
            data = decode_token(token)
        except TokenError:
            raise invalid from None

        if (
            data.type != "reset"
            or data.purpose != PASSWORD_RESET_PURPOSE
            or data.tenant_id != tenant_id
        ):
            raise invalid

        user = await self.users.get_by_id(data.user_id, tenant_id)
        if (
            not user
            or not user.is_active
            or data.fingerprint != password_fingerprint(user.password_hash)
        ):
            raise invalid

        await self.users.update(
            user.id, {"password_hash": hash_password(new_password)}, tenant_id
        )
        logger.info("password_reset_completed", user_id=str(user.id), tenant_id=str(tenant_id))


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
