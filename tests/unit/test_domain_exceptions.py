"""Tests for domain exceptions (error_code, message, details) and their HTTP status."""

import pytest

from tenancy.core.exception_handlers import status_for_error_code
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


def test_tenancy_exception_default_error_code() -> None:
    """Base TenancyException uses class name as error_code when not provided."""
    exc = TenancyException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "TenancyException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_to_dict_shape() -> None:
    exc = TenancyException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid format", field="role")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "role"}
    assert ValidationException("Invalid").details == {}


def test_tenant_not_found() -> None:
    exc = TenantNotFoundException("hq")
    assert exc.error_code == "TENANT_NOT_FOUND"
    assert exc.message == "Tenant not found: hq"
    assert exc.details == {"tenant_id": "hq"}


def test_no_auth_context_default_message() -> None:
    exc = NoAuthContextException()
    assert exc.error_code == "NO_AUTH_CONTEXT"
    assert exc.message == "Authentication required"


def test_permission_denied_uses_reason_as_message() -> None:
    exc = PermissionDeniedException(
        "product", "create", "no permission to 'create' on 'product'"
    )
    assert exc.error_code == "PERMISSION_DENIED"
    assert exc.message == "no permission to 'create' on 'product'"
    assert exc.details == {
        "resource": "product",
        "action": "create",
        "reason": "no permission to 'create' on 'product'",
    }


def test_permission_denied_without_reason() -> None:
    assert PermissionDeniedException("order", "refund").message == "Permission denied: refund on order"
    bare = PermissionDeniedException()
    assert bare.message == "Permission denied"
    assert bare.details == {}


def test_insufficient_role() -> None:
    exc = InsufficientRoleException(["TenantAdmin", "GlobalAdmin"])
    assert exc.message == "Requires one of: TenantAdmin, GlobalAdmin"
    assert exc.details == {"required_roles": ["TenantAdmin", "GlobalAdmin"]}


def test_tenant_access_denied() -> None:
    exc = TenantAccessDeniedException("paris")
    assert exc.error_code == "TENANT_ACCESS_DENIED"
    assert "paris" in exc.message


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("policy", "p1")
    assert exc.message == "policy not found: p1"
    assert exc.details == {"resource_type": "policy", "resource_id": "p1"}


def test_audit_write_failure_carries_context() -> None:
    exc = AuditWriteFailure("hq", "create", "user", "timeout")
    assert exc.error_code == "AUDIT_WRITE_FAILURE"
    assert exc.details["reason"] == "timeout"


@pytest.mark.parametrize(
    "exc,status",
    [
        (TenantNotFoundException("hq"), 400),
        (NoAuthContextException(), 401),
        (PermissionDeniedException(), 403),
        (InsufficientRoleException(["TenantAdmin"]), 403),
        (TenantAccessDeniedException("hq"), 403),
        (ResourceNotFoundException("policy", "x"), 404),
        (ValidationException("bad"), 400),
        (AuditWriteFailure("hq", "create", "user", "x"), 500),
        (TenancyException("unmapped"), 500),
    ],
)
def test_error_code_status_mapping(exc: TenancyException, status: int) -> None:
    assert status_for_error_code(exc.error_code) == status
