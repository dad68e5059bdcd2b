"""Pydantic schemas for tenant administration."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from todolist.core.constants import (
    HEX_COLOR_PATTERN,
    MAX_LOGO_URL_LENGTH,
    MAX_SUBDOMAIN_LENGTH,
    MAX_TENANT_NAME_LENGTH,
    MIN_SUBDOMAIN_LENGTH,
    MIN_TENANT_NAME_LENGTH,
    SUBDOMAIN_PATTERN,
)


def normalize_subdomain(value: str) -> str:
    """Subdomains are stored lowercase without surrounding whitespace."""
    return value.strip().lower()


class TenantBase(BaseModel):
    """Branding fields shared by create and update."""

    primary_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    logo_url: str | None = Field(None, max_length=MAX_LOGO_URL_LENGTH)


class TenantCreate(TenantBase):
    """Schema for creating a tenant."""

    name: str = Field(
        ..., min_length=MIN_TENANT_NAME_LENGTH, max_length=MAX_TENANT_NAME_LENGTH
    )
    subdomain: str = Field(
        ...,
        min_length=MIN_SUBDOMAIN_LENGTH,
        max_length=MAX_SUBDOMAIN_LENGTH,
        pattern=SUBDOMAIN_PATTERN,
    )

    @field_validator("subdomain", mode="before")
    @classmethod
    def lower_subdomain(cls, v: object) -> object:
        return normalize_subdomain(v) if isinstance(v, str) else v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class TenantUpdate(TenantBase):
    """Schema for updating a tenant. Omitted fields are left unchanged."""

    name: str | None = Field(
        None, min_length=MIN_TENANT_NAME_LENGTH, max_length=MAX_TENANT_NAME_LENGTH
    )
    subdomain: str | None = Field(
        None,
        min_length=MIN_SUBDOMAIN_LENGTH,
        max_length=MAX_SUBDOMAIN_LENGTH,
        pattern=SUBDOMAIN_PATTERN,
    )

    @field_validator("subdomain", mode="before")
    @classmethod
    def lower_subdomain(cls, v: object) -> object:
        return normalize_subdomain(v) if isinstance(v, str) else v


class TenantStatusUpdate(BaseModel):
    """Schema for activating or deactivating a tenant."""

    is_active: bool


class TenantResponse(BaseModel):
    """Schema for tenant response data."""

    id: UUID
    name: str
    subdomain: str
    is_active: bool
    primary_color: str | None = None
    logo_url: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubdomainCheckRequest(BaseModel):
    """Schema for checking subdomain availability."""

    subdomain: str = Field(..., min_length=1, max_length=255)


class SubdomainCheckResponse(BaseModel):
    """Availability of a subdomain. ``reason`` explains an unavailable one."""

    subdomain: str
    available: bool
    reason: str | None = None


class UserCounts(BaseModel):
    total: int
    active: int


class TodoCounts(BaseModel):
    total: int
    completed: int
    completion_rate: float


class TenantStatistics(BaseModel):
    """Usage counts for one tenant."""

    tenant_id: UUID
    users: UserCounts
    todos: TodoCounts
