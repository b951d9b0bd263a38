"""Application DTOs (no ORM dependency)."""

from tenancy.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogQuery,
    AuditLogResult,
)
from tenancy.application.dtos.rbac import (
    AccessDecision,
    PolicyCreate,
    PolicyResult,
    PolicyUpdate,
    RoleAssignmentResult,
    UserRoleGrant,
)
from tenancy.application.dtos.tenant import ResolvedTenant, TenantResult, TenantSignals

__all__ = [
    "AccessDecision",
    "AuditLogEntryCreate",
    "AuditLogQuery",
    "AuditLogResult",
    "PolicyCreate",
    "PolicyResult",
    "PolicyUpdate",
    "ResolvedTenant",
    "RoleAssignmentResult",
    "TenantResult",
    "TenantSignals",
    "UserRoleGrant",
]
