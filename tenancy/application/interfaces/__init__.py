"""Application ports (repository and service protocols)."""

from tenancy.application.interfaces.repositories import (
    IAuditLogRepository,
    IPolicyRepository,
    IRoleAssignmentRepository,
    ITenantRepository,
)
from tenancy.application.interfaces.services import ICacheService

__all__ = [
    "IAuditLogRepository",
    "ICacheService",
    "IPolicyRepository",
    "IRoleAssignmentRepository",
    "ITenantRepository",
]
