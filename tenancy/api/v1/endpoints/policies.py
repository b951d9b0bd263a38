"""Policy administration (GlobalAdmin only). Every write invalidates the role's policy cache."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from tenancy.api.v1.dependencies import (
    Caller,
    get_audit_hook,
    get_policy_admin_service,
    require_role,
)
from tenancy.application.dtos.rbac import PolicyCreate, PolicyUpdate
from tenancy.application.services import MutationAuditHook, PolicyAdminService
from tenancy.domain.enums import AuditAction, AuditResource, Role
from tenancy.domain.value_objects import PolicyConditions
from tenancy.schemas.rbac import (
    PolicyCreateRequest,
    PolicyListResponse,
    PolicyResponse,
    PolicyUpdateRequest,
)

router = APIRouter()

_require_global_admin = require_role(Role.GLOBAL_ADMIN)


@router.get("", response_model=PolicyListResponse)
async def list_policies(
    _: Annotated[Caller, Depends(_require_global_admin)],
    service: Annotated[PolicyAdminService, Depends(get_policy_admin_service)],
) -> PolicyListResponse:
    """Currently effective policies."""
    policies = await service.list_effective()
    return PolicyListResponse(
        policies=[PolicyResponse.from_result(p) for p in policies], count=len(policies)
    )


@router.get("/{policy_id}", response_model=PolicyResponse)
async def get_policy(
    policy_id: str,
    _: Annotated[Caller, Depends(_require_global_admin)],
    service: Annotated[PolicyAdminService, Depends(get_policy_admin_service)],
) -> PolicyResponse:
    return PolicyResponse.from_result(await service.get_policy(policy_id))


@router.post("", response_model=PolicyResponse, status_code=status.HTTP_201_CREATED)
async def create_policy(
    body: PolicyCreateRequest,
    _: Annotated[Caller, Depends(_require_global_admin)],
    service: Annotated[PolicyAdminService, Depends(get_policy_admin_service)],
    audit: Annotated[MutationAuditHook, Depends(get_audit_hook)],
) -> PolicyResponse:
    policy = await service.create_policy(
        PolicyCreate(
            role=body.role.value,
            resource=body.resource.value,
            actions=[a.value for a in body.actions],
            conditions=body.parsed_conditions() or PolicyConditions(),
            effective_from=body.effective_from,
            effective_until=body.effective_until,
        )
    )
    audit.committed(
        AuditAction.CREATE,
        AuditResource.POLICY,
        resource_id=policy.id,
        changes=body.model_dump(mode="json", exclude_none=True),
        status_code=status.HTTP_201_CREATED,
    )
    return PolicyResponse.from_result(policy)


@router.patch("/{policy_id}", response_model=PolicyResponse)
async def update_policy(
    policy_id: str,
    body: PolicyUpdateRequest,
    _: Annotated[Caller, Depends(_require_global_admin)],
    service: Annotated[PolicyAdminService, Depends(get_policy_admin_service)],
    audit: Annotated[MutationAuditHook, Depends(get_audit_hook)],
) -> PolicyResponse:
    """Partial update; version is bumped."""
    policy = await service.update_policy(
        policy_id,
        PolicyUpdate(
            role=body.role.value if body.role else None,
            resource=body.resource.value if body.resource else None,
            actions=[a.value for a in body.actions] if body.actions is not None else None,
            conditions=body.parsed_conditions(),
            effective_until=body.effective_until,
        ),
    )
    audit.committed(
        AuditAction.UPDATE,
        AuditResource.POLICY,
        resource_id=policy.id,
        changes=body.model_dump(mode="json", exclude_unset=True),
    )
    return PolicyResponse.from_result(policy)


@router.delete("/{policy_id}", response_model=PolicyResponse)
async def expire_policy(
    policy_id: str,
    _: Annotated[Caller, Depends(_require_global_admin)],
    service: Annotated[PolicyAdminService, Depends(get_policy_admin_service)],
    audit: Annotated[MutationAuditHook, Depends(get_audit_hook)],
) -> PolicyResponse:
    """End the policy's validity window now. Rows are never deleted."""
    policy = await service.expire_policy(policy_id)
    audit.committed(AuditAction.DELETE, AuditResource.POLICY, resource_id=policy.id)
    return PolicyResponse.from_result(policy)
