"""Tenant administration API routes.

Every route requires the main domain and an ADMIN user.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from todolist.api.pagination import PageQuery, PaginatedResponse, paginated
from todolist.core.auth.dependencies import require_main_domain, require_role
from todolist.modules.tenants.schemas import (
    SubdomainCheckRequest,
    SubdomainCheckResponse,
    TenantCreate,
    TenantResponse,
    TenantStatistics,
    TenantStatusUpdate,
    TenantUpdate,
)
from todolist.modules.tenants.services import TenantSvc
from todolist.modules.users.models import Role


router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
    dependencies=[Depends(require_main_domain), Depends(require_role(Role.ADMIN))],
)


@router.get(
    "",
    response_model=PaginatedResponse[TenantResponse],
    summary="List tenants",
)
async def list_tenants(
    service: TenantSvc,
    pages: PageQuery,
    search: Annotated[str | None, Query(max_length=100)] = None,
    is_active: bool | None = None,
) -> PaginatedResponse[TenantResponse]:
    """List tenants with optional search over name and subdomain."""
    page = await service.list_tenants(
        search=search,
        is_active=is_active,
        page=pages.page,
        page_size=pages.page_size,
    )
    return paginated(page, TenantResponse)


@router.post(
    "",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create tenant",
)
async def create_tenant(data: TenantCreate, service: TenantSvc) -> TenantResponse:
    """Create a tenant."""
    tenant = await service.create_tenant(data)
    return TenantResponse.model_validate(tenant)


@router.post(
    "/check-subdomain",
    response_model=SubdomainCheckResponse,
    summary="Check subdomain availability",
)
async def check_subdomain(
    data: SubdomainCheckRequest,
    service: TenantSvc,
) -> SubdomainCheckResponse:
    """Check whether a subdomain can be used for a new tenant."""
    return await service.check_subdomain(data.subdomain)


@router.get(
    "/{tenant_id}",
    response_model=TenantResponse,
    summary="Get tenant",
)
async def get_tenant(tenant_id: UUID, service: TenantSvc) -> TenantResponse:
    """Get a tenant by ID."""
    tenant = await service.get_tenant(tenant_id)
    return TenantResponse.model_validate(tenant)


@router.patch(
    "/{tenant_id}",
    response_model=TenantResponse,
    summary="Update tenant",
)
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    service: TenantSvc,
) -> TenantResponse:
    """Update a tenant's name, subdomain or branding."""
    tenant = await service.update_tenant(tenant_id, data)
    return TenantResponse.model_validate(tenant)


@router.patch(
    "/{tenant_id}/status",
    response_model=TenantResponse,
    summary="Activate or deactivate tenant",
)
async def update_tenant_status(
    tenant_id: UUID,
    data: TenantStatusUpdate,
    service: TenantSvc,
) -> TenantResponse:
    """Activate or deactivate a tenant."""
    tenant = await service.set_status(tenant_id, data.is_active)
    return TenantResponse.model_validate(tenant)


@router.get(
    "/{tenant_id}/statistics",
    response_model=TenantStatistics,
    summary="Tenant statistics",
)
async def get_tenant_statistics(tenant_id: UUID, service: TenantSvc) -> TenantStatistics:
    """Count a tenant's users and todos."""
    return await service.get_statistics(tenant_id)
