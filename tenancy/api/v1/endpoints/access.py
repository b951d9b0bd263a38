"""Diagnostic access check: run verify_access for the caller (or another user)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from tenancy.api.v1.dependencies import (
    Caller,
    get_permission_engine,
    require_tenant_access,
)
from tenancy.application.services import PermissionEngine
from tenancy.domain.enums import Role
from tenancy.domain.exceptions import InsufficientRoleException
from tenancy.schemas.rbac import AccessCheckRequest, AccessCheckResponse

router = APIRouter()


@router.post("", response_model=AccessCheckResponse)
async def check_access(
    body: AccessCheckRequest,
    caller: Annotated[Caller, Depends(require_tenant_access)],
    engine: Annotated[PermissionEngine, Depends(get_permission_engine)],
) -> AccessCheckResponse:
    """Evaluate a permission without performing it. Denials are reported, not raised."""
    target = body.user_id or caller.user_id
    if target != caller.user_id and not caller.is_global_admin:
        raise InsufficientRoleException([Role.GLOBAL_ADMIN.value])
    decision = await engine.verify_access(
        target, caller.tenant_id, body.resource, body.action, body.context
    )
    return AccessCheckResponse(
        user_id=target,
        tenant_id=caller.tenant_id,
        resource=body.resource,
        action=body.action,
        allowed=decision.allowed,
        reason=decision.reason,
    )
