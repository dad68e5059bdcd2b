"""Pagination query parameters and response envelope."""

from typing import Annotated, Any, Generic, TypeVar

from fastapi import Depends, Query
from pydantic import BaseModel

from todolist.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from todolist.core.database import Page


ItemT = TypeVar("ItemT", bound=BaseModel)


class PaginationMeta(BaseModel):
    """Pagination metadata. ``total_pages = ceil(total / page_size)``."""

    total: int
    page: int
    page_size: int
    total_pages: int


class PaginatedResponse(BaseModel, Generic[ItemT]):
    """One page of items plus pagination metadata."""

    data: list[ItemT]
    pagination: PaginationMeta


class PageParams:
    """Query parameters shared by list endpoints."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
        page_size: Annotated[
            int, Query(ge=1, le=MAX_PAGE_SIZE, description="Items per page")
        ] = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.page = page
        self.page_size = page_size


PageQuery = Annotated[PageParams, Depends(PageParams)]


def paginated(page: Page[Any], schema: type[ItemT]) -> PaginatedResponse[ItemT]:
    """Serialize a repository page with the given item schema."""
    return PaginatedResponse[schema](  # type: ignore[valid-type]
        data=[schema.model_validate(item) for item in page.data],
        pagination=PaginationMeta(
            total=page.pagination.total,
            page=page.pagination.page,
            page_size=page.pagination.page_size,
            total_pages=page.pagination.total_pages,
        ),
    )
