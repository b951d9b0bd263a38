"""Per-request audit hook for mutation endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from tenancy.application.dtos.tenant import ResolvedTenant
from tenancy.application.services import AuditRecorder, MutationAuditHook
from tenancy.shared.request_audit import get_audit_request_context

from .auth import get_current_user_id
from .services import get_audit_recorder
from .tenant import get_tenant_context


async def get_audit_hook(
    request: Request,
    resolved: Annotated[ResolvedTenant, Depends(get_tenant_context)],
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
    user_id: Annotated[str, Depends(get_current_user_id)],
) -> MutationAuditHook:
    """Hook the handler calls with committed(...) once its mutation succeeded."""
    _, ip_address, user_agent = get_audit_request_context(request)
    hook = MutationAuditHook(
        recorder,
        tenant_id=resolved.tenant_id,
        user_id=user_id,
        ip_address=ip_address,
        user_agent=user_agent,
        method=request.method,
        path=request.url.path,
    )
    noted = getattr(request.state, "access_decision", None)
    if noted is not None:
        decision, resource, action = noted
        hook.note_access(decision, resource, action)
    request.state.audit_hook = hook
    return hook
