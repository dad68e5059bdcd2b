"""Tenant resolution from the request hostname.

``acme.example.com``  -> tenant whose subdomain is ``acme``
``example.com``       -> main domain, no tenant
``localhost``         -> main domain when listed as a bypass host

Subdomain lookups require the tenant to be active. The development
default tenant is an explicit opt-in that is never honoured in
production.
"""

import re
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

import structlog

from todolist.core.constants import (
    MAX_SUBDOMAIN_LENGTH,
    MIN_SUBDOMAIN_LENGTH,
    SUBDOMAIN_PATTERN,
)
from todolist.core.errors import TenantNotFoundError
from todolist.core.tenancy.context import TenantContext, TenantInfo


if TYPE_CHECKING:
    from todolist.config import Settings
    from todolist.core.tenancy.cache import TenantCache


logger = structlog.get_logger()

_SUBDOMAIN_RE = re.compile(SUBDOMAIN_PATTERN)


class TenantDirectory(Protocol):
    """Read access to the tenant records the resolver needs."""

    async def find_active_by_subdomain(self, subdomain: str) -> TenantInfo | None: ...

    async def find_first_active(self) -> TenantInfo | None: ...


def normalize_host(host: str) -> str:
    """Lowercase a Host header value and strip the port and trailing dot."""
    hostname = host.strip().lower()
    if hostname.startswith("["):
        # IPv6 literal, e.g. [::1]:8000
        return hostname.split("]", 1)[0] + "]"
    return hostname.split(":", 1)[0].rstrip(".")


def extract_subdomain(hostname: str) -> str:
    """Return the leftmost label of a hostname."""
    return hostname.split(".", 1)[0]


def is_valid_subdomain(subdomain: str) -> bool:
    """Check a candidate label against the subdomain format rules."""
    return (
        MIN_SUBDOMAIN_LENGTH <= len(subdomain) <= MAX_SUBDOMAIN_LENGTH
        and _SUBDOMAIN_RE.match(subdomain) is not None
    )


class TenantResolver:
    """Derives a TenantContext from a request hostname.

    Args:
        directory: Tenant lookups, usually a TenantRepository
        main_domain: Root hostname used for tenant administration
        bypass_hosts: Extra hostnames treated as the main domain
        allow_default_tenant: Attach the first active tenant to main-domain
            requests. Forced off when ``production`` is true.
        production: Whether the process runs in production
        cache: Optional bounded cache of subdomain lookups
    """

    def __init__(
        self,
        directory: TenantDirectory,
        *,
        main_domain: str,
        bypass_hosts: Iterable[str] = (),
        allow_default_tenant: bool = False,
        production: bool = False,
        cache: "TenantCache | None" = None,
    ) -> None:
        self.directory = directory
        self.main_domain = normalize_host(main_domain)
        self.bypass_hosts = frozenset(normalize_host(h) for h in bypass_hosts)
        self.allow_default_tenant = allow_default_tenant and not production
        self.cache = cache

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        directory: TenantDirectory,
        cache: "TenantCache | None" = None,
    ) -> "TenantResolver":
        return cls(
            directory,
            main_domain=settings.main_domain,
            bypass_hosts=settings.dev_bypass_hosts,
            allow_default_tenant=settings.dev_default_tenant,
            production=settings.is_production,
            cache=cache,
        )

    def is_main_domain(self, hostname: str) -> bool:
        return hostname == self.main_domain or hostname in self.bypass_hosts

    async def resolve(self, host: str) -> TenantContext:
        """Resolve a Host header value to a tenant context.

        Args:
            host: Raw Host header, possibly with a port

        Returns:
            Main-domain context, or the context of an active tenant

        Raises:
            TenantNotFoundError: If the subdomain has no active tenant
        """
        hostname = normalize_host(host)

        if self.is_main_domain(hostname):
            return await self._main_domain_context()

        subdomain = extract_subdomain(hostname)
        tenant = await self._lookup(subdomain) if is_valid_subdomain(subdomain) else None
        if tenant is None:
            logger.warning("tenant_not_found", host=hostname, subdomain=subdomain)
            raise TenantNotFoundError(
                f"No active tenant for subdomain '{subdomain}'",
                subdomain=subdomain,
            )

        logger.debug("tenant_resolved", subdomain=subdomain, tenant_id=str(tenant.id))
        return TenantContext(is_main_domain=False, tenant=tenant)

    async def _main_domain_context(self) -> TenantContext:
        if not self.allow_default_tenant:
            return TenantContext(is_main_domain=True)

        tenant = await self.directory.find_first_active()
        if tenant is not None:
            logger.warning(
                "dev_default_tenant_used",
                tenant_id=str(tenant.id),
                subdomain=tenant.subdomain,
            )
        return TenantContext(is_main_domain=True, tenant=tenant)

    async def _lookup(self, subdomain: str) -> TenantInfo | None:
        if self.cache is not None:
            cached = await self.cache.get(subdomain)
            if cached is not None:
                return cached

        tenant = await self.directory.find_active_by_subdomain(subdomain)
        if tenant is not None and self.cache is not None:
            await self.cache.set(tenant)
        return tenant
