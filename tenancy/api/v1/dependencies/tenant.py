"""Tenant context for the request: resolve once, expose on request.state and the context var."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from tenancy.application.dtos.tenant import ResolvedTenant, TenantSignals
from tenancy.application.services import TenantResolver
from tenancy.core.config import get_settings
from tenancy.core.tenant_context import set_tenant_id

from .services import get_tenant_resolver


def signals_from_request(request: Request) -> TenantSignals:
    """Explicit tenant header and Host header (may carry a port)."""
    header_name = get_settings().tenant_header_name
    return TenantSignals(
        tenant_id=request.headers.get(header_name),
        host=request.headers.get("host"),
    )


async def get_tenant_context(
    request: Request,
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
) -> ResolvedTenant:
    """Resolve the tenant for this request.

    Raises:
        TenantNotFoundException: If no tenant, not even the default, exists.
    """
    resolved = await resolver.resolve(signals_from_request(request))
    request.state.tenant = resolved.tenant
    request.state.tenant_id = resolved.tenant_id
    request.state.tenant_detection_method = resolved.detection_method.value
    set_tenant_id(resolved.tenant_id)
    return resolved


async def get_tenant_id(
    resolved: Annotated[ResolvedTenant, Depends(get_tenant_context)],
) -> str:
    return resolved.tenant_id
