"""Domain layer: enums, value objects, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from tenancy.domain.enums import (
    Action,
    AuditAction,
    AuditResource,
    DetectionMethod,
    Resource,
    Role,
    TenantStatus,
)
from tenancy.domain.exceptions import (
    AuditWriteFailure,
    InsufficientRoleException,
    NoAuthContextException,
    PermissionDeniedException,
    ResourceNotFoundException,
    TenancyException,
    TenantAccessDeniedException,
    TenantNotFoundException,
    ValidationException,
)
from tenancy.domain.value_objects import FieldEquals, PolicyConditions

__all__ = [
    # Enums
    "Action",
    "AuditAction",
    "AuditResource",
    "DetectionMethod",
    "Resource",
    "Role",
    "TenantStatus",
    # Exceptions
    "AuditWriteFailure",
    "InsufficientRoleException",
    "NoAuthContextException",
    "PermissionDeniedException",
    "ResourceNotFoundException",
    "TenancyException",
    "TenantAccessDeniedException",
    "TenantNotFoundException",
    "ValidationException",
    # Value objects
    "FieldEquals",
    "PolicyConditions",
]
