"""Application services: tenant resolution, permission evaluation, audit, RBAC admin."""

from tenancy.application.services.audit_recorder import AuditRecorder, MutationAuditHook
from tenancy.application.services.permission_engine import PermissionEngine
from tenancy.application.services.policy_admin_service import PolicyAdminService
from tenancy.application.services.role_assignment_service import RoleAssignmentService
from tenancy.application.services.tenant_resolver import TenantResolver

__all__ = [
    "AuditRecorder",
    "MutationAuditHook",
    "PermissionEngine",
    "PolicyAdminService",
    "RoleAssignmentService",
    "TenantResolver",
]
