"""Tenant database models."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from todolist.core.constants import (
    MAX_LOGO_URL_LENGTH,
    MAX_SUBDOMAIN_LENGTH,
    MAX_TENANT_NAME_LENGTH,
)
from todolist.core.database.base import Base, TimestampMixin, UUIDMixin


class Tenant(Base, UUIDMixin, TimestampMixin):
    """Tenant model representing an organization.

    Tenants are the root of the data model and carry no tenant_id of
    their own. All tenant-owned data references this table via tenant_id.
    A tenant is deactivated rather than deleted once it owns data.

    Attributes:
        name: Display name
        subdomain: Globally unique hostname label used to resolve the tenant
        is_active: Inactive tenants do not resolve
        primary_color: Optional branding color (#rgb or #rrggbb)
        logo_url: Optional branding logo
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(MAX_TENANT_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    subdomain: Mapped[str] = mapped_column(
        String(MAX_SUBDOMAIN_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    primary_color: Mapped[str | None] = mapped_column(
        String(7),
        nullable=True,
    )
    logo_url: Mapped[str | None] = mapped_column(
        String(MAX_LOGO_URL_LENGTH),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, subdomain={self.subdomain})>"
