"""User API routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from todolist.api.pagination import PageQuery, PaginatedResponse, paginated
from todolist.core.auth.dependencies import AdminAuth, CurrentAuth
from todolist.modules.users.models import Role
from todolist.modules.users.schemas import (
    UserPasswordUpdate,
    UserResponse,
    UserStatusUpdate,
    UserUpdate,
)
from todolist.modules.users.services import UserSvc


router = APIRouter(prefix="/users", tags=["users"])


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Update profile",
)
async def update_me(
    data: UserUpdate,
    auth: CurrentAuth,
    service: UserSvc,
) -> UserResponse:
    """Update the current user's name or email."""
    user = await service.update_profile(auth, data)
    return UserResponse.model_validate(user)


@router.post(
    "/me/password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Change password",
)
async def change_password(
    data: UserPasswordUpdate,
    auth: CurrentAuth,
    service: UserSvc,
) -> None:
    """Change the current user's password."""
    await service.change_password(auth, data)


@router.get(
    "",
    response_model=PaginatedResponse[UserResponse],
    summary="List users",
    description="Lists users of the caller's tenant. Admin only.",
)
async def list_users(
    auth: AdminAuth,
    service: UserSvc,
    pages: PageQuery,
    search: Annotated[str | None, Query(max_length=100)] = None,
    role: Role | None = None,
    is_active: bool | None = None,
) -> PaginatedResponse[UserResponse]:
    """List users in the tenant."""
    page = await service.list_users(
        auth.tenant_id,
        search=search,
        role=role,
        is_active=is_active,
        page=pages.page,
        page_size=pages.page_size,
    )
    return paginated(page, UserResponse)


@router.patch(
    "/{user_id}/status",
    response_model=UserResponse,
    summary="Activate or deactivate a user",
    description="Admin only. Admins cannot change their own status.",
)
async def update_user_status(
    user_id: UUID,
    data: UserStatusUpdate,
    auth: AdminAuth,
    service: UserSvc,
) -> UserResponse:
    """Activate or deactivate a user."""
    user = await service.set_status(auth, user_id, data.is_active)
    return UserResponse.model_validate(user)
