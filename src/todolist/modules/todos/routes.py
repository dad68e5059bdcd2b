"""Todo and todo list API routes.

Every route authenticates through the access guard; the service then
scopes by the caller's tenant and checks ownership.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from todolist.api.pagination import PageQuery, PaginatedResponse, paginated
from todolist.core.auth.dependencies import CurrentAuth
from todolist.modules.todos.models import TodoPriority, TodoStatus
from todolist.modules.todos.schemas import (
    TodoCreate,
    TodoListCreate,
    TodoListResponse,
    TodoMove,
    TodoResponse,
    TodoStatistics,
    TodoStatusUpdate,
    TodoUpdate,
)
from todolist.modules.todos.services import TodoSvc


todos_router = APIRouter(prefix="/todos", tags=["todos"])
lists_router = APIRouter(prefix="/lists", tags=["lists"])


# ============================================================
# Todos
# ============================================================


@todos_router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create todo",
)
async def create_todo(
    data: TodoCreate,
    auth: CurrentAuth,
    service: TodoSvc,
) -> TodoResponse:
    """Create a todo owned by the current user."""
    todo = await service.create_todo(auth, data)
    return TodoResponse.model_validate(todo)


@todos_router.get(
    "",
    response_model=PaginatedResponse[TodoResponse],
    summary="List todos",
)
async def list_todos(
    auth: CurrentAuth,
    service: TodoSvc,
    pages: PageQuery,
    status_filter: Annotated[TodoStatus | None, Query(alias="status")] = None,
    priority: TodoPriority | None = None,
    list_id: UUID | None = None,
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> PaginatedResponse[TodoResponse]:
    """List the current user's todos."""
    page = await service.list_todos(
        auth,
        status=status_filter,
        priority=priority,
        list_id=list_id,
        search=search,
        page=pages.page,
        page_size=pages.page_size,
    )
    return paginated(page, TodoResponse)


@todos_router.get(
    "/upcoming",
    response_model=list[TodoResponse],
    summary="Upcoming todos",
    description="Incomplete todos due within the next 7 days.",
)
async def list_upcoming(auth: CurrentAuth, service: TodoSvc) -> list[TodoResponse]:
    """List todos due soon."""
    todos = await service.get_upcoming(auth)
    return [TodoResponse.model_validate(todo) for todo in todos]


@todos_router.get(
    "/overdue",
    response_model=list[TodoResponse],
    summary="Overdue todos",
    description="Incomplete todos whose due date has passed.",
)
async def list_overdue(auth: CurrentAuth, service: TodoSvc) -> list[TodoResponse]:
    """List overdue todos."""
    todos = await service.get_overdue(auth)
    return [TodoResponse.model_validate(todo) for todo in todos]


@todos_router.get(
    "/statistics",
    response_model=TodoStatistics,
    summary="Todo statistics",
)
async def get_statistics(auth: CurrentAuth, service: TodoSvc) -> TodoStatistics:
    """Counts over the current user's todos."""
    return await service.get_statistics(auth)


@todos_router.get(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Get todo",
)
async def get_todo(todo_id: UUID, auth: CurrentAuth, service: TodoSvc) -> TodoResponse:
    """Get one of the current user's todos."""
    todo = await service.get_todo(auth, todo_id)
    return TodoResponse.model_validate(todo)


@todos_router.patch(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Update todo",
)
async def update_todo(
    todo_id: UUID,
    data: TodoUpdate,
    auth: CurrentAuth,
    service: TodoSvc,
) -> TodoResponse:
    """Update one of the current user's todos."""
    todo = await service.update_todo(auth, todo_id, data)
    return TodoResponse.model_validate(todo)


@todos_router.patch(
    "/{todo_id}/status",
    response_model=TodoResponse,
    summary="Change todo status",
)
async def update_todo_status(
    todo_id: UUID,
    data: TodoStatusUpdate,
    auth: CurrentAuth,
    service: TodoSvc,
) -> TodoResponse:
    """Change the status of a todo."""
    todo = await service.update_status(auth, todo_id, data.status)
    return TodoResponse.model_validate(todo)


@todos_router.patch(
    "/{todo_id}/move",
    response_model=TodoResponse,
    summary="Move todo to a list",
)
async def move_todo(
    todo_id: UUID,
    data: TodoMove,
    auth: CurrentAuth,
    service: TodoSvc,
) -> TodoResponse:
    """Move a todo into a list, or out of its list."""
    todo = await service.move_todo(auth, todo_id, data.list_id)
    return TodoResponse.model_validate(todo)


@todos_router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete todo",
)
async def delete_todo(todo_id: UUID, auth: CurrentAuth, service: TodoSvc) -> None:
    """Delete one of the current user's todos."""
    await service.delete_todo(auth, todo_id)


# ============================================================
# Todo lists
# ============================================================


@lists_router.post(
    "",
    response_model=TodoListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create todo list",
)
async def create_list(
    data: TodoListCreate,
    auth: CurrentAuth,
    service: TodoSvc,
) -> TodoListResponse:
    """Create a todo list owned by the current user."""
    todo_list = await service.create_list(auth, data)
    return TodoListResponse.model_validate(todo_list)


@lists_router.get(
    "",
    response_model=list[TodoListResponse],
    summary="List todo lists",
)
async def list_lists(auth: CurrentAuth, service: TodoSvc) -> list[TodoListResponse]:
    """List the current user's todo lists."""
    lists = await service.list_lists(auth)
    return [TodoListResponse.model_validate(todo_list) for todo_list in lists]


@lists_router.get(
    "/{list_id}/todos",
    response_model=PaginatedResponse[TodoResponse],
    summary="List todos in a list",
)
async def list_todos_in_list(
    list_id: UUID,
    auth: CurrentAuth,
    service: TodoSvc,
    pages: PageQuery,
    status_filter: Annotated[TodoStatus | None, Query(alias="status")] = None,
    priority: TodoPriority | None = None,
) -> PaginatedResponse[TodoResponse]:
    """List todos in one of the current user's lists."""
    await service.get_list(auth, list_id)
    page = await service.list_todos(
        auth,
        status=status_filter,
        priority=priority,
        list_id=list_id,
        page=pages.page,
        page_size=pages.page_size,
    )
    return paginated(page, TodoResponse)


# Mounted by module discovery
router = APIRouter()
router.include_router(todos_router)
router.include_router(lists_router)
