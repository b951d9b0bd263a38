"""Helpers that pin queries and writes to the resolved tenant."""

from __future__ import annotations

from typing import Any

from tenancy.core.tenant_context import get_tenant_id
from tenancy.domain.exceptions import ValidationException


def _require_tenant(tenant_id: str | None) -> str:
    # Fall back to the tenant resolved for the current request.
    tenant_id = tenant_id or get_tenant_id()
    if not tenant_id:
        raise ValidationException("Tenant context is required", field="tenant_id")
    return tenant_id


def scope_filters_to_tenant(
    tenant_id: str | None, filters: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Return a copy of filters with tenant_id forced to the resolved tenant.

    A caller-supplied tenant_id is overwritten, never trusted.

    Raises:
        ValidationException: If no tenant is given or resolved.
    """
    scoped = dict(filters or {})
    scoped["tenant_id"] = _require_tenant(tenant_id)
    return scoped


def add_tenant_to_data(tenant_id: str | None, data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of data stamped with tenant_id for a create operation.

    Raises:
        ValidationException: If no tenant is given or resolved.
    """
    stamped = dict(data)
    stamped["tenant_id"] = _require_tenant(tenant_id)
    return stamped
