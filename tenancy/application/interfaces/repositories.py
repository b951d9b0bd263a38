"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tenancy.application.dtos.audit_log import (
        AuditLogEntryCreate,
        AuditLogQuery,
        AuditLogResult,
    )
    from tenancy.application.dtos.rbac import (
        PolicyCreate,
        PolicyResult,
        PolicyUpdate,
        RoleAssignmentResult,
        UserRoleGrant,
    )
    from tenancy.application.dtos.tenant import TenantResult


# Tenant repository interface
class ITenantRepository(Protocol):
    """Protocol for tenant lookups used by tenant resolution."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by identifier."""

    async def get_by_subdomain(self, subdomain: str) -> TenantResult | None:
        """Return tenant whose subdomain alias equals subdomain."""

    async def get_by_domain(self, domain: str) -> TenantResult | None:
        """Return tenant whose primary domain alias equals domain."""


# Role assignment repository interface
class IRoleAssignmentRepository(Protocol):
    """Protocol for admin_user rows (user, tenant, role)."""

    async def get_active_grants(self, user_id: str) -> list[UserRoleGrant]:
        """Return active (role, tenant_id) pairs for user. Never cached."""

    async def upsert(
        self, user_id: str, tenant_id: str | None, role: str, email: str | None
    ) -> tuple[RoleAssignmentResult, str | None]:
        """Insert or supersede the (user, tenant) row; return (row, previous role)."""

    async def deactivate(self, user_id: str, tenant_id: str | None) -> RoleAssignmentResult | None:
        """Set is_active False on the (user, tenant) row; None if absent."""

    async def update_role(
        self, user_id: str, tenant_id: str | None, role: str
    ) -> tuple[RoleAssignmentResult, str] | None:
        """Change role on the (user, tenant) row; return (row, previous role) or None."""

    async def list_for_user(self, user_id: str) -> list[RoleAssignmentResult]:
        """Active assignments for user, newest first."""

    async def list_for_tenant(self, tenant_id: str) -> list[RoleAssignmentResult]:
        """Active assignments in tenant, newest first."""

    async def count_active(self, user_id: str | None = None) -> int:
        """Count active assignments (optionally for one user)."""


# Policy repository interface
class IPolicyRepository(Protocol):
    """Protocol for rbac_policy rows."""

    async def list_effective(self, at: datetime) -> list[PolicyResult]:
        """Policies with effective_from <= at < effective_until (or unbounded)."""

    async def get_by_id(self, policy_id: str) -> PolicyResult | None:
        """Return one policy regardless of validity window."""

    async def create(self, data: PolicyCreate) -> PolicyResult:
        """Insert a policy row."""

    async def update(self, policy_id: str, data: PolicyUpdate) -> PolicyResult | None:
        """Apply a partial update and bump version; None if absent."""


# Audit log repository interface
class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit trail."""

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one entry."""

    async def list(self, query: AuditLogQuery) -> list[AuditLogResult]:
        """Entries matching query, newest first, paginated."""

    async def count(self, query: AuditLogQuery) -> int:
        """Total entries matching query (ignores limit/offset)."""
