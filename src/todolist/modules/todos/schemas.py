"""Pydantic schemas for todos and todo lists."""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from todolist.core.constants import (
    MAX_LIST_TITLE_LENGTH,
    MAX_TODO_DESCRIPTION_LENGTH,
    MAX_TODO_TITLE_LENGTH,
)
from todolist.modules.todos.models import TodoPriority, TodoStatus


def _clean_title(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("Title must not be empty")
    return value


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ============================================================
# Todo Schemas
# ============================================================


class TodoCreate(BaseModel):
    """Schema for creating a todo."""

    title: str = Field(..., min_length=1, max_length=MAX_TODO_TITLE_LENGTH)
    description: str | None = Field(None, max_length=MAX_TODO_DESCRIPTION_LENGTH)
    status: TodoStatus = TodoStatus.PENDING
    priority: TodoPriority = TodoPriority.MEDIUM
    due_date: datetime | None = None
    list_id: UUID | None = None

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str | None) -> str | None:
        return _clean_title(v)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class TodoUpdate(BaseModel):
    """Schema for updating a todo. Omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=MAX_TODO_TITLE_LENGTH)
    description: str | None = Field(None, max_length=MAX_TODO_DESCRIPTION_LENGTH)
    status: TodoStatus | None = None
    priority: TodoPriority | None = None
    due_date: datetime | None = None
    list_id: UUID | None = None

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str | None) -> str | None:
        return _clean_title(v)

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class TodoStatusUpdate(BaseModel):
    status: TodoStatus


class TodoMove(BaseModel):
    """Move a todo into a list, or out of any list with ``null``."""

    list_id: UUID | None


class TodoResponse(BaseModel):
    """Schema for todo response data."""

    id: UUID
    title: str
    description: str | None = None
    status: TodoStatus
    priority: TodoPriority
    due_date: datetime | None = None
    user_id: UUID
    tenant_id: UUID
    list_id: UUID | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TodoStatistics(BaseModel):
    """Counts over the caller's todos.

    ``completed + in_progress + pending + cancelled == total``.
    """

    total: int
    completed: int
    in_progress: int
    pending: int
    cancelled: int
    overdue: int
    high_priority: int
    completion_rate: float


# ============================================================
# Todo List Schemas
# ============================================================


class TodoListCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=MAX_LIST_TITLE_LENGTH)

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str) -> str | None:
        return _clean_title(v)


class TodoListResponse(BaseModel):
    """Schema for todo list response data."""

    id: UUID
    title: str
    user_id: UUID
    tenant_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
