"""DTOs for RBAC: role assignments, policies, and access decisions."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tenancy.domain.value_objects import PolicyConditions


@dataclass(frozen=True)
class UserRoleGrant:
    """One active (role, tenant) pair held by a user. tenant_id may be None for GlobalAdmin."""

    role: str
    tenant_id: str | None


@dataclass(frozen=True)
class RoleAssignmentResult:
    """Role assignment read-model (admin_user row)."""

    id: str
    user_id: str
    tenant_id: str | None
    role: str
    email: str | None
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class PolicyResult:
    """Effective policy row. actions is a tuple so cached values stay immutable."""

    id: str
    role: str
    resource: str
    actions: tuple[str, ...]
    conditions: PolicyConditions
    version: int
    effective_from: datetime
    effective_until: datetime | None = None


@dataclass(frozen=True)
class PolicyCreate:
    """Input for creating a policy row."""

    role: str
    resource: str
    actions: list[str]
    conditions: PolicyConditions = field(default_factory=PolicyConditions)
    effective_from: datetime | None = None
    effective_until: datetime | None = None


@dataclass(frozen=True)
class PolicyUpdate:
    """Partial update for a policy row. None means leave unchanged."""

    role: str | None = None
    resource: str | None = None
    actions: list[str] | None = None
    conditions: PolicyConditions | None = None
    effective_until: datetime | None = None


@dataclass(frozen=True)
class AccessDecision:
    """verify_access outcome. reason is set on denial."""

    allowed: bool
    reason: str | None = None

    def to_metadata(self, resource: str, action: str) -> dict[str, Any]:
        """Shape used in audit metadata (rbac_check)."""
        return {"resource": str(resource), "action": str(action), "allowed": self.allowed}
