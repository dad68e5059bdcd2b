"""User service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from todolist.core.auth.backend import hash_password, verify_password
from todolist.core.auth.guard import AuthenticatedContext
from todolist.core.database import Page
from todolist.core.errors import ConflictError, NotFoundError, ValidationError
from todolist.modules.users.models import Role, User
from todolist.modules.users.repos import UserRepo
from todolist.modules.users.schemas import UserPasswordUpdate, UserUpdate


logger = structlog.get_logger()


class UserService:
    """Service for user management operations.

    All operations are scoped to the authenticated user's tenant.
    """

    def __init__(self, repo: UserRepo) -> None:
        self.repo = repo

    async def get_user(self, user_id: UUID, tenant_id: UUID) -> User:
        """Get a user by ID within a tenant.

        Raises:
            NotFoundError: If the user is not in the tenant
        """
        user = await self.repo.get_by_id(user_id, tenant_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def update_profile(self, auth: AuthenticatedContext, data: UserUpdate) -> User:
        """Update the caller's name and/or email.

        Raises:
            ConflictError: If the new email is taken in this tenant
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and changes["email"] != auth.user.email:
            existing = await self.repo.get_by_email(changes["email"], auth.tenant_id)
            if existing:
                raise ConflictError(
                    "Email already in use",
                    error_code="email_exists",
                    details={"email": changes["email"]},
                )

        return await self.repo.update(auth.user_id, changes, auth.tenant_id)

    async def change_password(
        self, auth: AuthenticatedContext, data: UserPasswordUpdate
    ) -> None:
        """Change the caller's password after checking the current one.

        Raises:
            ValidationError: If the current password is wrong
        """
        if not verify_password(data.current_password, auth.user.password_hash):
            raise ValidationError(
                "Current password is incorrect",
                error_code="invalid_password",
                errors=[{"field": "current_password", "message": "Incorrect password"}],
            )

        await self.repo.update(
            auth.user_id,
            {"password_hash": hash_password(data.new_password)},
            auth.tenant_id,
        )
        logger.info("password_changed", user_id=str(auth.user_id))

    async def list_users(
        self,
        tenant_id: UUID,
        *,
        search: str | None = None,
        role: Role | None = None,
        is_active: bool | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[User]:
        """List users for a tenant."""
        return await self.repo.list_paginated(
            tenant_id,
            search=search,
            role=role,
            is_active=is_active,
            page=page,
            page_size=page_size,
        )

    async def set_status(
        self,
        auth: AuthenticatedContext,
        user_id: UUID,
        is_active: bool,
    ) -> User:
        """Activate or deactivate a user of the caller's tenant.

        Raises:
            ValidationError: If an admin tries to change their own status
            NotFoundError: If the user is not in the tenant
        """
        if user_id == auth.user_id:
            raise ValidationError(
                "You cannot change your own status",
                error_code="cannot_change_own_status",
            )

        user = await self.repo.update(user_id, {"is_active": is_active}, auth.tenant_id)
        logger.info(
            "user_activated" if is_active else "user_deactivated",
            user_id=str(user_id),
            by_user_id=str(auth.user_id),
        )
        return user


# Type alias for dependency injection
UserSvc = Annotated[UserService, Depends(UserService)]
