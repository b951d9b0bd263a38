"""RBAC guards: require_permission, require_role, require_tenant_access.

Guards run after tenant resolution and caller identification, so the three
failure modes stay distinct: 400 (tenant), 401 (identity), 403 (access).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from fastapi import Depends, Request

from tenancy.application.dtos.rbac import AccessDecision, UserRoleGrant
from tenancy.application.services import PermissionEngine
from tenancy.domain.enums import Role
from tenancy.domain.exceptions import (
    InsufficientRoleException,
    PermissionDeniedException,
    TenantAccessDeniedException,
)

from .auth import get_current_user_id
from .services import get_permission_engine
from .tenant import get_tenant_id

ContextBuilder = Callable[[Request], Mapping[str, Any] | None]


@dataclass(frozen=True)
class Caller:
    """Authenticated caller within the resolved tenant."""

    user_id: str
    tenant_id: str
    grants: tuple[UserRoleGrant, ...] = ()

    @property
    def is_global_admin(self) -> bool:
        return any(g.role == Role.GLOBAL_ADMIN.value for g in self.grants)

    def roles_in_tenant(self) -> set[str]:
        """Roles that apply in tenant_id (GlobalAdmin applies everywhere)."""
        return {
            g.role
            for g in self.grants
            if g.role == Role.GLOBAL_ADMIN.value or g.tenant_id == self.tenant_id
        }


def _note_decision(request: Request, decision: AccessDecision, resource: str, action: str) -> None:
    request.state.access_decision = (decision, resource, action)
    hook = getattr(request.state, "audit_hook", None)
    if hook is not None:
        hook.note_access(decision, resource, action)


async def require_tenant_access(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    engine: Annotated[PermissionEngine, Depends(get_permission_engine)],
) -> Caller:
    """Caller must hold an assignment for the resolved tenant (or be GlobalAdmin)."""
    grants = tuple(await engine.get_user_roles(user_id))
    caller = Caller(user_id=user_id, tenant_id=tenant_id, grants=grants)
    if not caller.roles_in_tenant():
        raise TenantAccessDeniedException(tenant_id)
    return caller


def require_role(*roles: str | Enum):
    """Dependency factory: caller must hold one of roles in the resolved tenant."""
    allowed = [r.value if isinstance(r, Enum) else str(r) for r in roles]

    async def _require(
        caller: Annotated[Caller, Depends(require_tenant_access)],
    ) -> Caller:
        if not PermissionEngine.has_any_role(caller.roles_in_tenant(), allowed):
            raise InsufficientRoleException(allowed)
        return caller

    return _require


def require_permission(
    resource: str | Enum,
    action: str | Enum,
    context_builder: ContextBuilder | None = None,
):
    """Dependency factory: verify_access(caller, tenant, resource, action) must allow.

    context_builder, when given, derives the condition context from the request.
    The decision is attached to the request's audit hook as rbac_check.
    """
    resource_name = resource.value if isinstance(resource, Enum) else str(resource)
    action_name = action.value if isinstance(action, Enum) else str(action)

    async def _require(
        request: Request,
        tenant_id: Annotated[str, Depends(get_tenant_id)],
        user_id: Annotated[str, Depends(get_current_user_id)],
        engine: Annotated[PermissionEngine, Depends(get_permission_engine)],
    ) -> Caller:
        context = context_builder(request) if context_builder else None
        decision = await engine.verify_access(
            user_id, tenant_id, resource_name, action_name, context
        )
        _note_decision(request, decision, resource_name, action_name)
        if not decision.allowed:
            raise PermissionDeniedException(resource_name, action_name, decision.reason)
        grants = tuple(await engine.get_user_roles(user_id))
        return Caller(user_id=user_id, tenant_id=tenant_id, grants=grants)

    return _require
