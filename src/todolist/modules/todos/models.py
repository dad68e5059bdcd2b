"""Todo and todo list database models."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from todolist.core.constants import (
    MAX_LIST_TITLE_LENGTH,
    MAX_TODO_TITLE_LENGTH,
)
from todolist.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class TodoStatus(StrEnum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TodoPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TodoList(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A named list grouping a user's todos."""

    __tablename__ = "todo_lists"

    title: Mapped[str] = mapped_column(
        String(MAX_LIST_TITLE_LENGTH),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<TodoList(id={self.id}, title={self.title}, user_id={self.user_id})>"


class Todo(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A single to-do item.

    A todo's tenant_id always equals its owner's tenant_id; both are
    stamped from the authenticated context on create.

    Attributes:
        title: 1-255 characters
        description: Optional, up to 1000 characters
        status: PENDING, IN_PROGRESS, COMPLETED or CANCELLED
        priority: LOW, MEDIUM, HIGH or URGENT
        due_date: Optional due timestamp
        user_id: Owning user
        list_id: Optional todo list
    """

    __tablename__ = "todos"
    __table_args__ = (
        Index("ix_todos_tenant_user", "tenant_id", "user_id"),
        Index("ix_todos_tenant_user_due", "tenant_id", "user_id", "due_date"),
    )

    title: Mapped[str] = mapped_column(
        String(MAX_TODO_TITLE_LENGTH),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    status: Mapped[TodoStatus] = mapped_column(
        Enum(TodoStatus, native_enum=False, length=20),
        default=TodoStatus.PENDING,
        nullable=False,
        index=True,
    )
    priority: Mapped[TodoPriority] = mapped_column(
        Enum(TodoPriority, native_enum=False, length=20),
        default=TodoPriority.MEDIUM,
        nullable=False,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    list_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("todo_lists.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, title={self.title}, status={self.status})>"
