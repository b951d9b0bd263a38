"""Tenant context for the current request.

The tenant dependency sets the resolved tenant ID in this context variable
so that logging, audit assembly and tenant-scoping helpers can read it
without threading the request object through every call.
"""

from contextvars import ContextVar

# Current tenant ID for the request (set by get_tenant_context, read anywhere downstream).
current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)


def set_tenant_id(tenant_id: str | None) -> None:
    """Set the current tenant ID for this context (e.g. request)."""
    current_tenant_id.set(tenant_id)


def get_tenant_id() -> str | None:
    """Return the current tenant ID if set."""
    return current_tenant_id.get()
