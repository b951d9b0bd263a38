"""SQLAlchemy repositories. Each takes an async_sessionmaker and returns application DTOs."""

from tenancy.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from tenancy.infrastructure.persistence.repositories.policy_repo import PolicyRepository
from tenancy.infrastructure.persistence.repositories.role_assignment_repo import (
    RoleAssignmentRepository,
)
from tenancy.infrastructure.persistence.repositories.tenant_repo import TenantRepository

__all__ = [
    "AuditLogRepository",
    "PolicyRepository",
    "RoleAssignmentRepository",
    "TenantRepository",
]
