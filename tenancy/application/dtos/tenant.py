"""DTOs for tenant resolution (no dependency on ORM)."""

from dataclasses import dataclass, field

from tenancy.domain.enums import DetectionMethod, TenantStatus


@dataclass(frozen=True)
class TenantResult:
    """Tenant read-model (result of get_by_id, get_by_domain, get_by_subdomain)."""

    id: str
    name: str
    default_locale: str
    currency_code: str
    domain: str | None
    subdomain: str | None
    status: TenantStatus
    capabilities: dict[str, bool] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def has_capability(self, name: str) -> bool:
        """Return True if the named capability toggle is on."""
        return bool(self.capabilities.get(name, False))


@dataclass(frozen=True)
class TenantSignals:
    """Request signals the resolver inspects, in priority order.

    tenant_id comes from the explicit override header; host is the raw Host
    header value (may include a port).
    """

    tenant_id: str | None = None
    host: str | None = None


@dataclass(frozen=True)
class ResolvedTenant:
    """Resolver output: the tenant plus which signal produced it."""

    tenant: TenantResult
    detection_method: DetectionMethod

    @property
    def tenant_id(self) -> str:
        return self.tenant.id
