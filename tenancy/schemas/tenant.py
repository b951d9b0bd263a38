"""Resolved tenant context schemas."""

from pydantic import BaseModel, Field

from tenancy.application.dtos.tenant import ResolvedTenant


class TenantContextResponse(BaseModel):
    """Resolved tenant plus the signal that produced it."""

    success: bool = True
    tenant_id: str
    tenant_name: str
    currency: str
    locale: str
    status: str
    detection_method: str = Field(..., description="header | subdomain | domain | default")
    domain: str | None = None
    subdomain: str | None = None

    @classmethod
    def from_resolved(cls, resolved: ResolvedTenant) -> "TenantContextResponse":
        tenant = resolved.tenant
        return cls(
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            currency=tenant.currency_code,
            locale=tenant.default_locale,
            status=tenant.status.value,
            detection_method=resolved.detection_method.value,
            domain=tenant.domain,
            subdomain=tenant.subdomain,
        )


class StoreTenantInfoResponse(TenantContextResponse):
    """Public store view; adds capability toggles."""

    capabilities: dict[str, bool] = Field(default_factory=dict)


class AdminTenantContextResponse(TenantContextResponse):
    """Admin diagnostic view; echoes the raw detection signals."""

    request_host: str | None = None
    request_tenant_header: str | None = None
