"""Authentication API routes.

Provides endpoints for:
- User registration within the current tenant
- Login/logout and token refresh
- Token verification and the current user
- Password reset
"""

import structlog
from fastapi import APIRouter, status

from todolist.config import settings
from todolist.core.auth.dependencies import (
    CurrentAuth,
    CurrentTenant,
    CurrentTenantContext,
    Guard,
)
from todolist.core.auth.service import AuthSvc
from todolist.modules.users.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserResponse,
    VerifyResponse,
)


logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Creates a user in the tenant resolved from the request subdomain.",
)
async def register(
    data: RegisterRequest,
    tenant: CurrentTenant,
    service: AuthSvc,
) -> AuthResponse:
    """Register a new user in the current tenant."""
    user, tokens = await service.register(
        email=data.email,
        password=data.password,
        name=data.name,
        tenant_id=tenant.id,
    )

    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
    description="Authenticate within the current tenant to receive access and refresh tokens.",
)
async def login(
    data: LoginRequest,
    tenant: CurrentTenant,
    service: AuthSvc,
) -> AuthResponse:
    """Login with email and password."""
    user, tokens = await service.login(
        email=data.email,
        password=data.password,
        tenant_id=tenant.id,
    )

    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh access token",
    description="Exchange a refresh token for a new token pair.",
)
async def refresh_token(
    data: RefreshTokenRequest,
    context: CurrentTenantContext,
    guard: Guard,
    service: AuthSvc,
) -> TokenResponse:
    """Refresh the access token."""
    auth = await guard.authenticate(context, data.refresh_token, token_type="refresh")
    tokens = service.issue_tokens(auth.user)

    return TokenResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
    )


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Logout",
    description="Tokens are stateless; clients discard them. The logout is recorded.",
)
async def logout(auth: CurrentAuth) -> None:
    """Logout the current user."""
    logger.info("user_logged_out", user_id=str(auth.user_id), tenant_id=str(auth.tenant_id))


@router.get(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify token",
    description="Checks the bearer token against the current tenant.",
)
async def verify(auth: CurrentAuth) -> VerifyResponse:
    """Verify the current token."""
    return VerifyResponse(
        user=UserResponse.model_validate(auth.user),
        tenant=auth.tenant_context.tenant,
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Returns the currently authenticated user's profile.",
)
async def get_me(auth: CurrentAuth) -> UserResponse:
    """Get current user profile."""
    return UserResponse.model_validate(auth.user)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Request a password reset",
    description="Always accepted, whether or not the account exists.",
)
async def forgot_password(
    data: ForgotPasswordRequest,
    tenant: CurrentTenant,
    service: AuthSvc,
) -> ForgotPasswordResponse:
    """Issue a password reset credential."""
    token = await service.request_password_reset(data.email, tenant.id)
    return ForgotPasswordResponse(
        reset_token=None if settings.is_production else token,
    )


@router.post(
    "/reset-password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reset password",
    description="Sets a new password using a reset credential from forgot-password.",
)
async def reset_password(
    data: ResetPasswordRequest,
    tenant: CurrentTenant,
    service: AuthSvc,
) -> None:
    """Reset the password."""
    await service.reset_password(data.token, data.password, tenant.id)
