"""Pydantic schemas for user and authentication operations."""

import re
from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from todolist.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from todolist.core.tenancy.context import TenantInfo
from todolist.modules.users.models import Role


# ============================================================
# Field Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\\;'`~_+\-=/]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Validate password meets complexity requirements.

    Requirements:
    - At least one digit
    - At least one special character

    Args:
        password: The password to validate

    Returns:
        The validated password

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


def normalize_email(email: str) -> str:
    return email.strip().lower()


Password = Annotated[
    str, Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
]


# ============================================================
# User Schemas
# ============================================================


class UserResponse(BaseModel):
    """Schema for user response data. The password hash is never exposed."""

    id: UUID
    email: str
    name: str
    role: Role
    tenant_id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Schema for updating the caller's own profile."""

    email: EmailStr | None = None
    name: str | None = Field(None, min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v else v


class UserPasswordUpdate(BaseModel):
    """Schema for changing the caller's password."""

    current_password: str
    new_password: Password

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserStatusUpdate(BaseModel):
    """Schema for activating or deactivating a user."""

    is_active: bool


# ============================================================
# Authentication Schemas
# ============================================================


class RegisterRequest(BaseModel):
    """Schema for registering a user in the current tenant."""

    email: EmailStr
    password: Password
    name: str = Field(..., min_length=MIN_NAME_LENGTH, max_length=MAX_NAME_LENGTH)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class TokenResponse(BaseModel):
    """Schema for authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")


class AuthResponse(TokenResponse):
    """Schema for register/login responses: tokens plus the user."""

    user: UserResponse


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing access token."""

    refresh_token: str


class VerifyResponse(BaseModel):
    """Schema for token verification."""

    valid: bool = True
    user: UserResponse
    tenant: TenantInfo | None = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return normalize_email(v)


class ForgotPasswordResponse(BaseModel):
    """Always returned, whether or not the account exists.

    ``reset_token`` is only filled outside production, where no email
    delivery exists to carry it.
    """

    message: str = "If the account exists, password reset instructions have been sent"
    reset_token: str | None = None


class ResetPasswordRequest(BaseModel):
    token: str
    password: Password

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)
