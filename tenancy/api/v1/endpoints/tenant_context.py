"""Tenant context diagnostics: which tenant did this request resolve to, and how."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from tenancy.api.v1.dependencies import get_tenant_context
from tenancy.application.dtos.tenant import ResolvedTenant
from tenancy.core.config import get_settings
from tenancy.schemas.tenant import AdminTenantContextResponse, StoreTenantInfoResponse

store_router = APIRouter()
admin_router = APIRouter()


@store_router.get("/tenant-info", response_model=StoreTenantInfoResponse)
async def store_tenant_info(
    resolved: Annotated[ResolvedTenant, Depends(get_tenant_context)],
) -> StoreTenantInfoResponse:
    """Public: resolved tenant, its capabilities and the detection method."""
    base = StoreTenantInfoResponse.from_resolved(resolved)
    return base.model_copy(update={"capabilities": dict(resolved.tenant.capabilities)})


@admin_router.get("/tenant-context", response_model=AdminTenantContextResponse)
async def admin_tenant_context(
    request: Request,
    resolved: Annotated[ResolvedTenant, Depends(get_tenant_context)],
) -> AdminTenantContextResponse:
    """Resolved tenant alongside the raw Host and tenant header values."""
    base = AdminTenantContextResponse.from_resolved(resolved)
    return base.model_copy(
        update={
            "request_host": request.headers.get("host"),
            "request_tenant_header": request.headers.get(get_settings().tenant_header_name),
        }
    )
