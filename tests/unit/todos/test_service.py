"""Unit tests for TodoService ownership and scoping rules."""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from todolist.core.constants import UPCOMING_WINDOW_DAYS
from todolist.core.errors import ForbiddenError, NotFoundError
from todolist.modules.todos.models import TodoStatus
from todolist.modules.todos.schemas import TodoCreate, TodoUpdate
from todolist.modules.todos.services import TodoService, completion_rate


@pytest.fixture
def auth() -> SimpleNamespace:
    return SimpleNamespace(user_id=uuid4(), tenant_id=uuid4())


@pytest.fixture
def repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def lists() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(repo: AsyncMock, lists: AsyncMock) -> TodoService:
    return TodoService(repo, lists)


def owned_by(auth, **fields) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), user_id=auth.user_id, tenant_id=auth.tenant_id, **fields)


class TestCompletionRate:
    def test_no_todos(self):
        assert completion_rate(0, 0) == 0.0

    def test_rounds_to_two_places(self):
        assert completion_rate(1, 3) == 33.33


class TestCreateTodo:
    async def test_stamps_owner_and_tenant(self, service, repo, auth):
        await service.create_todo(auth, TodoCreate(title="  Write report  "))

        data, tenant_id = repo.create.await_args.args
        assert tenant_id == auth.tenant_id
        assert data["user_id"] == auth.user_id
        assert data["title"] == "Write report"
        assert data["status"] == TodoStatus.PENDING

    async def test_list_must_be_owned(self, service, repo, lists, auth):
        lists.get_by_id.return_value = SimpleNamespace(id=uuid4(), user_id=uuid4())

        with pytest.raises(ForbiddenError):
            await service.create_todo(auth, TodoCreate(title="x", list_id=uuid4()))

        repo.create.assert_not_awaited()

    async def test_list_must_exist_in_tenant(self, service, repo, lists, auth):
        lists.get_by_id.return_value = None
        list_id = uuid4()

        with pytest.raises(NotFoundError):
            await service.create_todo(auth, TodoCreate(title="x", list_id=list_id))

        lists.get_by_id.assert_awaited_once_with(list_id, auth.tenant_id)


class TestGetTodo:
    async def test_scoped_by_tenant(self, service, repo, auth):
        todo = owned_by(auth)
        repo.get_by_id.return_value = todo

        assert await service.get_todo(auth, todo.id) is todo
        repo.get_by_id.assert_awaited_once_with(todo.id, auth.tenant_id)

    async def test_absent_is_not_found(self, service, repo, auth):
        repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.get_todo(auth, uuid4())

    async def test_other_owner_is_forbidden(self, service, repo, auth):
        repo.get_by_id.return_value = SimpleNamespace(id=uuid4(), user_id=uuid4())

        with pytest.raises(ForbiddenError) as exc_info:
            await service.get_todo(auth, uuid4())

        assert exc_info.value.error_code == "not_owner"


class TestUpdateTodo:
    async def test_only_sent_fields_change(self, service, repo, auth):
        todo = owned_by(auth)
        repo.get_by_id.return_value = todo

        await service.update_todo(auth, todo.id, TodoUpdate(description=None, title="New"))

        todo_id, changes, tenant_id = repo.update.await_args.args
        assert changes == {"description": None, "title": "New"}
        assert tenant_id == auth.tenant_id

    async def test_null_required_fields_are_ignored(self, service, repo, auth):
        todo = owned_by(auth)
        repo.get_by_id.return_value = todo

        await service.update_todo(auth, todo.id, TodoUpdate(title=None, status=None))

        _, changes, _ = repo.update.await_args.args
        assert changes == {}

    async def test_other_owner_cannot_delete(self, service, repo, auth):
        repo.get_by_id.return_value = SimpleNamespace(id=uuid4(), user_id=uuid4())

        with pytest.raises(ForbiddenError):
            await service.delete_todo(auth, uuid4())

        repo.delete.assert_not_awaited()

    async def test_move_out_of_list(self, service, repo, lists, auth):
        todo = owned_by(auth)
        repo.get_by_id.return_value = todo

        await service.move_todo(auth, todo.id, None)

        lists.get_by_id.assert_not_awaited()
        repo.update.assert_awaited_once_with(todo.id, {"list_id": None}, auth.tenant_id)


class TestDateWindows:
    async def test_upcoming_window(self, service, repo, auth):
        repo.find_due_between.return_value = []

        await service.get_upcoming(auth)

        tenant_id, user_id, start, end = repo.find_due_between.await_args.args
        assert (tenant_id, user_id) == (auth.tenant_id, auth.user_id)
        assert end - start == timedelta(days=UPCOMING_WINDOW_DAYS)
        assert start.tzinfo is not None

    async def test_overdue(self, service, repo, auth):
        repo.find_overdue.return_value = []

        await service.get_overdue(auth)

        tenant_id, user_id, now = repo.find_overdue.await_args.args
        assert (tenant_id, user_id) == (auth.tenant_id, auth.user_id)


class TestStatistics:
    async def test_counts_and_rate(self, service, repo, auth):
        # total, completed, in_progress, pending, cancelled, overdue, high_priority
        repo.count_for_user.side_effect = [4, 1, 1, 1, 1, 2, 3]

        stats = await service.get_statistics(auth)

        assert stats.total == 4
        assert stats.completed == 1
        assert stats.overdue == 2
        assert stats.high_priority == 3
        assert stats.completion_rate == 25.0
        for call in repo.count_for_user.await_args_list:
            assert call.args[:2] == (auth.tenant_id, auth.user_id)
