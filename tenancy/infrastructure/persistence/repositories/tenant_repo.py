"""Tenant repository. Read-only lookups used by tenant resolution."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.application.dtos.tenant import TenantResult
from tenancy.domain.enums import TenantStatus
from tenancy.infrastructure.persistence.models.tenant import Tenant


def _tenant_to_result(t: Tenant) -> TenantResult:
    """Map ORM Tenant to application TenantResult."""
    return TenantResult(
        id=t.id,
        name=t.name,
        default_locale=t.default_locale,
        currency_code=t.currency_code,
        domain=t.domain,
        subdomain=t.subdomain,
        status=TenantStatus(t.status),
        capabilities={k: bool(v) for k, v in (t.capabilities or {}).items()},
    )


class TenantRepository:
    """Tenant lookups by identifier and by detection alias. Not cached here;
    TenantResolver caches results."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _first(self, *criteria) -> TenantResult | None:
        async with self._session_factory() as session:
            result = await session.execute(select(Tenant).where(*criteria).limit(1))
            row = result.scalar_one_or_none()
            return _tenant_to_result(row) if row else None

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        return await self._first(Tenant.id == tenant_id)

    async def get_by_subdomain(self, subdomain: str) -> TenantResult | None:
        return await self._first(Tenant.subdomain == subdomain)

    async def get_by_domain(self, domain: str) -> TenantResult | None:
        return await self._first(Tenant.domain == domain)
