"""Todo and todo list repositories."""

from datetime import datetime
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends
from sqlalchemy import ColumnElement, or_

from todolist.api.dependencies import DBSession
from todolist.core.database import Page, TenantScopedRepository, icontains
from todolist.modules.todos.models import Todo, TodoList, TodoPriority, TodoStatus


class TodoRepository:
    """Repository for Todo database operations.

    Methods take the tenant explicitly; the user filter is added on top
    of the tenant filter by the listing methods.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session
        self.records = TenantScopedRepository(session, Todo)

    async def get_by_id(self, todo_id: UUID, tenant_id: UUID) -> Todo | None:
        return await self.records.find_by_id(todo_id, tenant_id)

    async def create(self, data: dict[str, Any], tenant_id: UUID) -> Todo:
        return await self.records.create(data, tenant_id)

    async def update(self, todo_id: UUID, data: dict[str, Any], tenant_id: UUID) -> Todo:
        return await self.records.update(todo_id, data, tenant_id)

    async def delete(self, todo_id: UUID, tenant_id: UUID) -> None:
        await self.records.delete(todo_id, tenant_id)

    async def list_for_user(
        self,
        tenant_id: UUID,
        user_id: UUID,
        *,
        status: TodoStatus | None = None,
        priority: TodoPriority | None = None,
        list_id: UUID | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[Todo]:
        """List a user's todos, newest first, with optional filters.

        ``search`` matches title or description case-insensitively.
        """
        where: list[ColumnElement[bool]] = [Todo.user_id == user_id]
        if status is not None:
            where.append(Todo.status == status)
        if priority is not None:
            where.append(Todo.priority == priority)
        if list_id is not None:
            where.append(Todo.list_id == list_id)
        if search:
            where.append(
                or_(icontains(Todo.title, search), icontains(Todo.description, search))
            )

        return await self.records.find_paginated(
            where,
            tenant_id,
            page,
            page_size,
            order_by=[Todo.created_at.desc()],
        )

    async def find_due_between(
        self,
        tenant_id: UUID,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[Todo]:
        """Incomplete todos due within [start, end], soonest first."""
        return await self.records.find_many(
            [
                Todo.user_id == user_id,
                Todo.due_date >= start,
                Todo.due_date <= end,
                Todo.status != TodoStatus.COMPLETED,
            ],
            tenant_id,
            order_by=[Todo.due_date.asc()],
        )

    async def find_overdue(
        self,
        tenant_id: UUID,
        user_id: UUID,
        now: datetime,
    ) -> list[Todo]:
        """Incomplete todos due before ``now``, oldest first."""
        return await self.records.find_many(
            [
                Todo.user_id == user_id,
                Todo.due_date < now,
                Todo.status != TodoStatus.COMPLETED,
            ],
            tenant_id,
            order_by=[Todo.due_date.asc()],
        )

    async def count_for_user(
        self,
        tenant_id: UUID,
        user_id: UUID,
        *criteria: ColumnElement[bool],
    ) -> int:
        return await self.records.count([Todo.user_id == user_id, *criteria], tenant_id)


class TodoListRepository:
    """Repository for TodoList database operations."""

    def __init__(self, session: DBSession) -> None:
        self.session = session
        self.records = TenantScopedRepository(session, TodoList)

    async def get_by_id(self, list_id: UUID, tenant_id: UUID) -> TodoList | None:
        return await self.records.find_by_id(list_id, tenant_id)

    async def create(self, data: dict[str, Any], tenant_id: UUID) -> TodoList:
        return await self.records.create(data, tenant_id)

    async def list_for_user(self, tenant_id: UUID, user_id: UUID) -> list[TodoList]:
        return await self.records.find_many(
            [TodoList.user_id == user_id],
            tenant_id,
            order_by=[TodoList.created_at.asc()],
        )


# Type aliases for dependency injection
TodoRepo = Annotated[TodoRepository, Depends(TodoRepository)]
TodoListRepo = Annotated[TodoListRepository, Depends(TodoListRepository)]
