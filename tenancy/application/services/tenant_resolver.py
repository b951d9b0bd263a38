"""Tenant resolution from request signals.

Detection order (first match wins):
    1. explicit tenant id header
    2. subdomain (first label, only when the host has more than two labels)
    3. full host as domain alias (port stripped)
    4. the configured default tenant

Every lookup goes through the cache under tenant:<lookup-value>. Lookups
that find nothing are not cached.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from tenancy.application.dtos.tenant import ResolvedTenant, TenantResult, TenantSignals
from tenancy.application.interfaces.repositories import ITenantRepository
from tenancy.application.interfaces.services import ICacheService
from tenancy.core.tenant_validation import is_valid_host_format, is_valid_tenant_id_format
from tenancy.domain.enums import DetectionMethod
from tenancy.domain.exceptions import TenantNotFoundException
from tenancy.infrastructure.cache.keys import tenant_key

logger = logging.getLogger(__name__)


def normalize_host(host: str | None) -> str | None:
    """Lowercase host, strip port and trailing dot. None when empty or malformed."""
    if not host:
        return None
    value = host.strip().lower()
    if value.startswith("["):
        # IPv6 literal; never a tenant alias.
        return None
    value = value.split(":", 1)[0].rstrip(".")
    if not is_valid_host_format(value):
        return None
    return value


def extract_subdomain(host: str) -> str | None:
    """First label of host when it has more than two dot-separated labels."""
    labels = host.split(".")
    if len(labels) > 2:
        return labels[0]
    return None


class TenantResolver:
    """Resolves the tenant for a request. Built once at startup; holds no per-request state."""

    def __init__(
        self,
        tenant_repo: ITenantRepository,
        cache: ICacheService,
        *,
        default_tenant_id: str = "hq",
        ttl: float = 300,
    ) -> None:
        self._repo = tenant_repo
        self._cache = cache
        self._default_tenant_id = default_tenant_id
        self._ttl = ttl

    @property
    def default_tenant_id(self) -> str:
        return self._default_tenant_id

    async def _lookup(
        self, value: str, fetch: Callable[[str], Awaitable[TenantResult | None]]
    ) -> TenantResult | None:
        return await self._cache.get_or_fetch(
            tenant_key(value), lambda: fetch(value), self._ttl
        )

    async def resolve(self, signals: TenantSignals) -> ResolvedTenant:
        """Return the tenant for signals and how it was detected.

        Raises:
            TenantNotFoundException: If not even the default tenant exists.
        """
        header_value = (signals.tenant_id or "").strip()
        if header_value:
            if is_valid_tenant_id_format(header_value):
                tenant = await self._lookup(header_value, self._repo.get_by_id)
                if tenant is not None:
                    return self._resolved(tenant, DetectionMethod.HEADER)
                logger.debug("Tenant header %s matched no tenant", header_value)
            else:
                logger.warning("Ignoring malformed tenant header value")

        host = normalize_host(signals.host)
        if host:
            subdomain = extract_subdomain(host)
            if subdomain:
                tenant = await self._lookup(subdomain, self._repo.get_by_subdomain)
                if tenant is not None:
                    return self._resolved(tenant, DetectionMethod.SUBDOMAIN)
            tenant = await self._lookup(host, self._repo.get_by_domain)
            if tenant is not None:
                return self._resolved(tenant, DetectionMethod.DOMAIN)

        tenant = await self._lookup(self._default_tenant_id, self._repo.get_by_id)
        if tenant is None:
            logger.error("Default tenant %s not found", self._default_tenant_id)
            raise TenantNotFoundException(self._default_tenant_id)
        return self._resolved(tenant, DetectionMethod.DEFAULT)

    def _resolved(self, tenant: TenantResult, method: DetectionMethod) -> ResolvedTenant:
        logger.debug("Tenant detected via %s: %s", method.value, tenant.id)
        return ResolvedTenant(tenant=tenant, detection_method=method)

    def invalidate_tenant(self, tenant: TenantResult) -> None:
        """Drop every cached lookup that can return tenant (id, domain, subdomain)."""
        # Host-derived lookups are lowercased by normalize_host.
        keys = {tenant_key(tenant.id)}
        for alias in (tenant.domain, tenant.subdomain):
            if alias:
                keys.add(tenant_key(alias.lower()))
        for key in keys:
            self._cache.invalidate(key)
