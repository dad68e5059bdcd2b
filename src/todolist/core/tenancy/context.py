"""Per-request tenant context."""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Request
from pydantic import BaseModel, ConfigDict


class TenantInfo(BaseModel):
    """The slice of a tenant record carried through a request."""

    id: UUID
    name: str
    subdomain: str
    primary_color: str | None = None
    logo_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


@dataclass(frozen=True)
class TenantContext:
    """Result of resolving a request hostname.

    ``is_main_domain`` requests are not bound to a tenant. They carry a
    tenant only when the development default tenant is enabled.
    """

    is_main_domain: bool
    tenant: TenantInfo | None = None

    @property
    def tenant_id(self) -> UUID | None:
        return self.tenant.id if self.tenant else None


# Used when resolution is skipped (health and docs paths)
MAIN_DOMAIN_CONTEXT = TenantContext(is_main_domain=True)


def get_tenant_context(request: Request) -> TenantContext:
    """Return the context attached by TenantResolutionMiddleware."""
    return getattr(request.state, "tenant_context", MAIN_DOMAIN_CONTEXT)
