"""Unit tests for request schemas and validation rules."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from tests.factories.schemas import (
    RegisterRequestFactory,
    TenantCreateFactory,
    TodoCreateFactory,
)
from todolist.api.pagination import paginated
from todolist.core.database import Page, Pagination
from todolist.core.utils import suggest_subdomain
from todolist.modules.tenants.schemas import TenantCreate, TenantUpdate
from todolist.modules.todos.models import TodoPriority, TodoStatus
from todolist.modules.todos.schemas import TodoCreate, TodoResponse, TodoUpdate
from todolist.modules.users.schemas import RegisterRequest, validate_password_complexity


class TestTodoSchemas:
    def test_defaults(self):
        todo = TodoCreate(title="Write report")

        assert todo.status == TodoStatus.PENDING
        assert todo.priority == TodoPriority.MEDIUM
        assert todo.due_date is None
        assert todo.list_id is None

    def test_title_is_stripped(self):
        assert TodoCreate(title="  Write report ").title == "Write report"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title):
        with pytest.raises(ValidationError):
            TodoCreate(title=title)

    def test_title_length_limit(self):
        with pytest.raises(ValidationError):
            TodoCreate(title="x" * 256)

    def test_description_length_limit(self):
        with pytest.raises(ValidationError):
            TodoCreate(title="ok", description="x" * 1001)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            TodoCreate(title="ok", status="DONE")

    def test_due_date_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        todo = TodoCreate(title="ok", due_date=datetime(2030, 1, 1, 12, 0, tzinfo=plus_two))

        assert todo.due_date == datetime(2030, 1, 1, 10, 0, tzinfo=UTC)
        assert todo.due_date.utcoffset() == timedelta(0)

    def test_naive_due_date_taken_as_utc(self):
        todo = TodoCreate(title="ok", due_date=datetime(2030, 1, 1, 12, 0))

        assert todo.due_date == datetime(2030, 1, 1, 12, 0, tzinfo=UTC)

    def test_update_tracks_only_sent_fields(self):
        update = TodoUpdate(priority="HIGH")

        assert update.model_dump(exclude_unset=True) == {"priority": TodoPriority.HIGH}

    def test_factory_builds_valid_payload(self):
        todo = TodoCreateFactory.build()

        assert todo.title.startswith("Task ")
        assert todo.list_id is None


class TestUserSchemas:
    def test_email_is_lowercased(self):
        data = RegisterRequest(email="Alice@Example.COM", password="Password1!", name="Alice")

        assert data.email == "alice@example.com"

    @pytest.mark.parametrize(
        "password",
        ["short1!", "NoDigitsHere!", "NoSpecial123", "x" * 129 + "1!"],
    )
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.com", password=password, name="Alice")

    def test_complexity_message_lists_missing_rules(self):
        with pytest.raises(ValueError, match="digit, special character"):
            validate_password_complexity("abcdefgh")

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="not-an-email", password="Password1!", name="Alice")

    def test_factory_builds_valid_payload(self):
        data = RegisterRequestFactory.build()

        assert data.email.endswith("@example.com")


class TestTenantSchemas:
    def test_subdomain_is_lowercased(self):
        assert TenantCreate(name="Acme", subdomain=" ACME ").subdomain == "acme"

    @pytest.mark.parametrize("subdomain", ["ab", "-acme", "acme-", "ac.me", "ac_me"])
    def test_bad_subdomain_rejected(self, subdomain):
        with pytest.raises(ValidationError):
            TenantCreate(name="Acme", subdomain=subdomain)

    @pytest.mark.parametrize("color", ["#fff", "#1A2b3C"])
    def test_hex_colors_accepted(self, color):
        assert TenantCreate(name="Acme", subdomain="acme", primary_color=color).primary_color

    @pytest.mark.parametrize("color", ["fff", "#ffff", "#ggg", "red"])
    def test_bad_colors_rejected(self, color):
        with pytest.raises(ValidationError):
            TenantCreate(name="Acme", subdomain="acme", primary_color=color)

    def test_name_length(self):
        with pytest.raises(ValidationError):
            TenantCreate(name="A", subdomain="acme")

    def test_update_allows_partial(self):
        assert TenantUpdate(name="New name").model_dump(exclude_unset=True) == {
            "name": "New name"
        }

    def test_factory_builds_valid_payload(self):
        data = TenantCreateFactory.build()

        assert data.subdomain.startswith("t-")


class TestSuggestSubdomain:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Acme Corp", "acme-corp"),
            ("Hello! World_2024", "hello-world2024"),
            ("  -Edge-  Case- ", "edge-case"),
        ],
    )
    def test_suggestions(self, name, expected):
        assert suggest_subdomain(name) == expected


class TestPaginated:
    def test_metadata(self):
        page = Page(data=[], pagination=Pagination(total=21, page=3, page_size=10))

        response = paginated(page, TodoResponse)

        assert response.data == []
        assert response.pagination.total_pages == 3
        assert response.pagination.page == 3

    def test_empty_result_has_zero_pages(self):
        page = Page(data=[], pagination=Pagination(total=0, page=1, page_size=10))

        assert paginated(page, TodoResponse).pagination.total_pages == 0
