"""User database models."""

from enum import StrEnum

from sqlalchemy import Boolean, Enum, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from todolist.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from todolist.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class Role(StrEnum):
    """Roles a user can hold inside their tenant."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """User model representing an authenticated user.

    Users belong to exactly one tenant. The same email may exist in two
    tenants as two distinct users.

    Attributes:
        email: Lowercased email address, unique within the tenant
        password_hash: Bcrypt hash, never serialized outward
        name: Display name
        role: ADMIN or USER
        is_active: Whether the user can authenticate
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", "tenant_id", name="uq_users_email_tenant"),
    )

    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=20),
        default=Role.USER,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, tenant_id={self.tenant_id})>"
