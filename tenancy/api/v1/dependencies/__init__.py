"""FastAPI dependencies (composition root for routes)."""

from .audit import get_audit_hook
from .auth import get_current_user_id
from .rbac import Caller, require_permission, require_role, require_tenant_access
from .services import (
    get_audit_recorder,
    get_cache,
    get_permission_engine,
    get_policy_admin_service,
    get_role_assignment_service,
    get_services,
    get_tenant_resolver,
)
from .tenant import get_tenant_context, get_tenant_id

__all__ = [
    "Caller",
    "get_audit_hook",
    "get_audit_recorder",
    "get_cache",
    "get_current_user_id",
    "get_permission_engine",
    "get_policy_admin_service",
    "get_role_assignment_service",
    "get_services",
    "get_tenant_context",
    "get_tenant_id",
    "get_tenant_resolver",
    "require_permission",
    "require_role",
    "require_tenant_access",
]
