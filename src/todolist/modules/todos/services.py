"""Todo service for business logic.

Two scoping layers apply to every todo: the tenant filter added by the
repository, then an ownership check against the authenticated user.
A todo in another tenant is NotFound; a todo of another user in the
same tenant is Forbidden.
"""

from datetime import timedelta
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy import ColumnElement

from todolist.core.auth.guard import AuthenticatedContext
from todolist.core.constants import UPCOMING_WINDOW_DAYS
from todolist.core.database import Page, utcnow
from todolist.core.errors import ForbiddenError, NotFoundError
from todolist.modules.todos.models import Todo, TodoList, TodoPriority, TodoStatus
from todolist.modules.todos.repos import TodoListRepo, TodoRepo
from todolist.modules.todos.schemas import (
    TodoCreate,
    TodoListCreate,
    TodoStatistics,
    TodoUpdate,
)


logger = structlog.get_logger()

# Required columns: an explicit null in an update means "unchanged"
_NON_NULLABLE_FIELDS = ("title", "status", "priority")


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed todos, 0 when there are none."""
    if total == 0:
        return 0.0
    return round(completed / total * 100, 2)


class TodoService:
    """Service for todo operations on behalf of an authenticated user."""

    def __init__(self, repo: TodoRepo, lists: TodoListRepo) -> None:
        self.repo = repo
        self.lists = lists

    async def create_todo(self, auth: AuthenticatedContext, data: TodoCreate) -> Todo:
        """Create a todo owned by the caller.

        Raises:
            NotFoundError: If ``list_id`` is not a list in the caller's tenant
            ForbiddenError: If the list belongs to another user
        """
        if data.list_id is not None:
            await self.get_list(auth, data.list_id)

        todo = await self.repo.create(
            {**data.model_dump(), "user_id": auth.user_id},
            auth.tenant_id,
        )
        logger.info("todo_created", todo_id=str(todo.id), user_id=str(auth.user_id))
        return todo

    async def list_todos(
        self,
        auth: AuthenticatedContext,
        *,
        status: TodoStatus | None = None,
        priority: TodoPriority | None = None,
        list_id: UUID | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page[Todo]:
        return await self.repo.list_for_user(
            auth.tenant_id,
            auth.user_id,
            status=status,
            priority=priority,
            list_id=list_id,
            search=search,
            page=page,
            page_size=page_size,
        )

    async def get_todo(self, auth: AuthenticatedContext, todo_id: UUID) -> Todo:
        """Load a todo the caller owns.

        Raises:
            NotFoundError: If the todo is absent or in another tenant
            ForbiddenError: If the todo belongs to another user
        """
        todo = await self.repo.get_by_id(todo_id, auth.tenant_id)
        if todo is None:
            raise NotFoundError(
                "Todo not found",
                resource="todo",
                resource_id=str(todo_id),
            )
        if todo.user_id != auth.user_id:
            raise ForbiddenError(
                "You do not have access to this todo",
                error_code="not_owner",
            )
        return todo

    async def update_todo(
        self,
        auth: AuthenticatedContext,
        todo_id: UUID,
        data: TodoUpdate,
    ) -> Todo:
        """Update fields of a todo the caller owns."""
        await self.get_todo(auth, todo_id)

        changes = data.model_dump(exclude_unset=True)
        for key in _NON_NULLABLE_FIELDS:
            if key in changes and changes[key] is None:
                del changes[key]

        if changes.get("list_id") is not None:
            await self.get_list(auth, changes["list_id"])

        return await self.repo.update(todo_id, changes, auth.tenant_id)

    async def update_status(
        self,
        auth: AuthenticatedContext,
        todo_id: UUID,
        status: TodoStatus,
    ) -> Todo:
        await self.get_todo(auth, todo_id)
        return await self.repo.update(todo_id, {"status": status}, auth.tenant_id)

    async def move_todo(
        self,
        auth: AuthenticatedContext,
        todo_id: UUID,
        list_id: UUID | None,
    ) -> Todo:
        """Move a todo into one of the caller's lists, or out of any list."""
        await self.get_todo(auth, todo_id)
        if list_id is not None:
            await self.get_list(auth, list_id)
        return await self.repo.update(todo_id, {"list_id": list_id}, auth.tenant_id)

    async def delete_todo(self, auth: AuthenticatedContext, todo_id: UUID) -> None:
        await self.get_todo(auth, todo_id)
        await self.repo.delete(todo_id, auth.tenant_id)
        logger.info("todo_deleted", todo_id=str(todo_id), user_id=str(auth.user_id))

    async def get_upcoming(self, auth: AuthenticatedContext) -> list[Todo]:
        """Incomplete todos due between now and the end of the upcoming window."""
        now = utcnow()
        return await self.repo.find_due_between(
            auth.tenant_id,
            auth.user_id,
            now,
            now + timedelta(days=UPCOMING_WINDOW_DAYS),
        )

    async def get_overdue(self, auth: AuthenticatedContext) -> list[Todo]:
        """Incomplete todos whose due date has passed."""
        return await self.repo.find_overdue(auth.tenant_id, auth.user_id, utcnow())

    async def get_statistics(self, auth: AuthenticatedContext) -> TodoStatistics:
        """Count the caller's todos by status, overdue and high priority."""
        now = utcnow()

        async def count(*criteria: ColumnElement[bool]) -> int:
            return await self.repo.count_for_user(auth.tenant_id, auth.user_id, *criteria)

        total = await count()
        completed = await count(Todo.status == TodoStatus.COMPLETED)
        in_progress = await count(Todo.status == TodoStatus.IN_PROGRESS)
        pending = await count(Todo.status == TodoStatus.PENDING)
        cancelled = await count(Todo.status == TodoStatus.CANCELLED)
        overdue = await count(
            Todo.due_date < now,
            Todo.status != TodoStatus.COMPLETED,
        )
        high_priority = await count(
            Todo.priority.in_([TodoPriority.HIGH, TodoPriority.URGENT]),
            Todo.status != TodoStatus.COMPLETED,
        )

        return TodoStatistics(
            total=total,
            completed=completed,
            in_progress=in_progress,
            pending=pending,
            cancelled=cancelled,
            overdue=overdue,
            high_priority=high_priority,
            completion_rate=completion_rate(completed, total),
        )

    # Todo lists

    async def create_list(self, auth: AuthenticatedContext, data: TodoListCreate) -> TodoList:
        return await self.lists.create(
            {"title": data.title, "user_id": auth.user_id},
            auth.tenant_id,
        )

    async def list_lists(self, auth: AuthenticatedContext) -> list[TodoList]:
        return await self.lists.list_for_user(auth.tenant_id, auth.user_id)

    async def get_list(self, auth: AuthenticatedContext, list_id: UUID) -> TodoList:
        """Load a todo list the caller owns.

        Raises:
            NotFoundError: If the list is absent or in another tenant
            ForbiddenError: If the list belongs to another user
        """
        todo_list = await self.lists.get_by_id(list_id, auth.tenant_id)
        if todo_list is None:
            raise NotFoundError(
                "Todo list not found",
                resource="todo_list",
                resource_id=str(list_id),
            )
        if todo_list.user_id != auth.user_id:
            raise ForbiddenError(
                "You do not have access to this list",
                error_code="not_owner",
            )
        return todo_list


# Type alias for dependency injection
TodoSvc = Annotated[TodoService, Depends(TodoService)]
