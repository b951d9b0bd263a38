"""Domain exceptions for the tenancy core.

Defines domain-level exceptions that represent resolution, identity and
access failures. These exceptions are independent of infrastructure
concerns. The presentation layer maps them to HTTP responses in
tenancy.core.exception_handlers.
"""

from typing import Any


class TenancyException(Exception):
    """Base exception for all tenancy core errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. resource, action).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used for HTTP error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TenancyException):
    """Raised when input validation fails (e.g. malformed policy conditions)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class TenantNotFoundException(TenancyException):
    """Raised when no tenant (not even the default tenant) can be resolved.

    Fatal to the request: no tenant context is usable downstream.
    """

    def __init__(self, tenant_id: str) -> None:
        """Initialize with the last identifier that was looked up.

        Args:
            tenant_id: The tenant ID (usually the default tenant) that was not found.
        """
        super().__init__(
            f"Tenant not found: {tenant_id}",
            "TENANT_NOT_FOUND",
            {"tenant_id": tenant_id},
        )


class NoAuthContextException(TenancyException):
    """Raised when the caller identity is missing or unreadable.

    Surfaced before any permission check runs.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "NO_AUTH_CONTEXT")


class PermissionDeniedException(TenancyException):
    """Raised at the request boundary when verify_access denies the caller.

    Carries the attempted resource/action and the engine's reason string.
    """

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize with the attempted permission and the denial reason.

        Args:
            resource: Resource that was targeted (e.g. 'product').
            action: Action that was attempted (e.g. 'create').
            reason: Human-readable reason from the permission engine.
        """
        if reason:
            message = reason
        elif resource and action:
            message = f"Permission denied: {action} on {resource}"
        else:
            message = "Permission denied"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = str(resource)
        if action:
            details["action"] = str(action)
        if reason:
            details["reason"] = reason
        super().__init__(message, "PERMISSION_DENIED", details)
        self.resource = resource
        self.action = action
        self.reason = reason


class InsufficientRoleException(TenancyException):
    """Raised when the caller holds none of the roles an operation requires."""

    def __init__(self, required_roles: list[str]) -> None:
        super().__init__(
            f"Requires one of: {', '.join(required_roles)}",
            "INSUFFICIENT_ROLE",
            {"required_roles": required_roles},
        )


class TenantAccessDeniedException(TenancyException):
    """Raised when the caller has no assignment granting the resolved tenant."""

    def __init__(self, tenant_id: str) -> None:
        super().__init__(
            f"You don't have access to tenant '{tenant_id}'",
            "TENANT_ACCESS_DENIED",
            {"tenant_id": tenant_id},
        )


class ResourceNotFoundException(TenancyException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'policy', 'role_assignment').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AuditWriteFailure(TenancyException):
    """Raised internally when an audit entry cannot be persisted.

    Never leaves AuditRecorder: it is logged and dropped there.
    """

    def __init__(self, tenant_id: str, action: str, resource: str, reason: str) -> None:
        super().__init__(
            f"Failed to write audit entry: {action} {resource} in tenant {tenant_id}",
            "AUDIT_WRITE_FAILURE",
            {
                "tenant_id": tenant_id,
                "action": action,
                "resource": resource,
                "reason": reason,
            },
        )
