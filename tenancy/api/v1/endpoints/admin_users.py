"""Role assignment administration for the resolved tenant."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from tenancy.api.v1.dependencies import (
    Caller,
    get_audit_hook,
    get_role_assignment_service,
    require_permission,
)
from tenancy.application.services import MutationAuditHook, RoleAssignmentService
from tenancy.domain.enums import Action, AuditAction, AuditResource, Resource, Role
from tenancy.domain.exceptions import InsufficientRoleException, TenantAccessDeniedException
from tenancy.schemas.rbac import (
    RoleAssignmentCreate,
    RoleAssignmentListResponse,
    RoleAssignmentResponse,
    RoleAssignmentUpdate,
)

router = APIRouter()


def _target_tenant(caller: Caller, requested: str | None) -> str:
    """Only GlobalAdmin may manage assignments outside the resolved tenant."""
    tenant_id = requested or caller.tenant_id
    if tenant_id != caller.tenant_id and not caller.is_global_admin:
        raise TenantAccessDeniedException(tenant_id)
    return tenant_id


def _check_role_grantable(caller: Caller, role: Role) -> None:
    if role == Role.GLOBAL_ADMIN and not caller.is_global_admin:
        raise InsufficientRoleException([Role.GLOBAL_ADMIN.value])


async def _check_target_modifiable(
    caller: Caller, service: RoleAssignmentService, user_id: str, tenant_id: str
) -> None:
    """Only GlobalAdmin may change or revoke an existing GlobalAdmin assignment."""
    if caller.is_global_admin:
        return
    current = await service.get_assignment(user_id, tenant_id)
    if current is not None and current.role == Role.GLOBAL_ADMIN.value:
        raise InsufficientRoleException([Role.GLOBAL_ADMIN.value])


@router.get("", response_model=RoleAssignmentListResponse)
async def list_tenant_users(
    caller: Annotated[Caller, Depends(require_permission(Resource.USER, Action.READ))],
    service: Annotated[RoleAssignmentService, Depends(get_role_assignment_service)],
) -> RoleAssignmentListResponse:
    """Active role assignments in the resolved tenant."""
    rows = await service.get_tenant_users(caller.tenant_id)
    return RoleAssignmentListResponse(
        users=[RoleAssignmentResponse.model_validate(r) for r in rows], count=len(rows)
    )


@router.get("/{user_id}", response_model=RoleAssignmentListResponse)
async def list_user_assignments(
    user_id: str,
    caller: Annotated[Caller, Depends(require_permission(Resource.USER, Action.READ))],
    service: Annotated[RoleAssignmentService, Depends(get_role_assignment_service)],
) -> RoleAssignmentListResponse:
    """A user's active assignments. Non-GlobalAdmin callers only see the resolved tenant."""
    rows = await service.get_user_tenants(user_id)
    if not caller.is_global_admin:
        rows = [r for r in rows if r.tenant_id == caller.tenant_id]
    return RoleAssignmentListResponse(
        users=[RoleAssignmentResponse.model_validate(r) for r in rows], count=len(rows)
    )


@router.post("", response_model=RoleAssignmentResponse, status_code=status.HTTP_201_CREATED)
async def assign_user(
    body: RoleAssignmentCreate,
    caller: Annotated[Caller, Depends(require_permission(Resource.USER, Action.CREATE))],
    service: Annotated[RoleAssignmentService, Depends(get_role_assignment_service)],
    audit: Annotated[MutationAuditHook, Depends(get_audit_hook)],
) -> RoleAssignmentResponse:
    """Assign (or supersede) the user's role in a tenant."""
    _check_role_grantable(caller, body.role)
    tenant_id = _target_tenant(caller, body.tenant_id)
    await _check_target_modifiable(caller, service, body.user_id, tenant_id)
    row = await service.assign_user_to_tenant(body.user_id, tenant_id, body.role, body.email)
    audit.committed(
        AuditAction.CREATE,
        AuditResource.USER,
        resource_id=body.user_id,
        changes=body.model_dump(mode="json"),
        status_code=status.HTTP_201_CREATED,
    )
    return RoleAssignmentResponse.model_validate(row)


@router.patch("/{user_id}", response_model=RoleAssignmentResponse)
async def update_user_role(
    user_id: str,
    body: RoleAssignmentUpdate,
    caller: Annotated[Caller, Depends(require_permission(Resource.USER, Action.UPDATE))],
    service: Annotated[RoleAssignmentService, Depends(get_role_assignment_service)],
    audit: Annotated[MutationAuditHook, Depends(get_audit_hook)],
    tenant_id: str | None = Query(None, description="Defaults to the resolved tenant"),
) -> RoleAssignmentResponse:
    _check_role_grantable(caller, body.role)
    target = _target_tenant(caller, tenant_id)
    await _check_target_modifiable(caller, service, user_id, target)
    row = await service.update_user_role(user_id, target, body.role)
    audit.committed(
        AuditAction.UPDATE,
        AuditResource.USER,
        resource_id=user_id,
        changes={"role": body.role.value, "tenant_id": target},
    )
    return RoleAssignmentResponse.model_validate(row)


@router.delete("/{user_id}", response_model=RoleAssignmentResponse)
async def remove_user(
    user_id: str,
    caller: Annotated[Caller, Depends(require_permission(Resource.USER, Action.DELETE))],
    service: Annotated[RoleAssignmentService, Depends(get_role_assignment_service)],
    audit: Annotated[MutationAuditHook, Depends(get_audit_hook)],
    tenant_id: str | None = Query(None, description="Defaults to the resolved tenant"),
) -> RoleAssignmentResponse:
    """Deactivate the user's assignment (the row is kept)."""
    target = _target_tenant(caller, tenant_id)
    await _check_target_modifiable(caller, service, user_id, target)
    row = await service.remove_user_from_tenant(user_id, target)
    audit.committed(
        AuditAction.DELETE,
        AuditResource.USER,
        resource_id=user_id,
        extra={"tenant_id": target},
    )
    return RoleAssignmentResponse.model_validate(row)
