"""Audit log API: tenant-scoped audit entries (who did what, when), newest first."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from tenancy.api.v1.dependencies import Caller, get_audit_recorder, get_tenant_id, require_role
from tenancy.application.dtos.audit_log import AuditLogQuery
from tenancy.application.services import AuditRecorder
from tenancy.domain.enums import Role
from tenancy.domain.exceptions import ValidationException
from tenancy.schemas.audit_log import (
    AuditLogEntryResponse,
    AuditLogHistoryResponse,
    AuditLogListResponse,
)

router = APIRouter()

_require_audit_reader = require_role(Role.TENANT_ADMIN, Role.GLOBAL_ADMIN)


@router.get("", response_model=AuditLogListResponse)
async def list_audit_logs(
    _: Annotated[Caller, Depends(_require_audit_reader)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user_id: str | None = Query(None, description="Filter by acting user"),
    resource: str | None = Query(None, description="Filter by resource kind"),
    action: str | None = Query(None, description="Filter by action kind"),
    start_date: datetime | None = Query(None, description="Created at or after (ISO8601)"),
    end_date: datetime | None = Query(None, description="Created at or before (ISO8601)"),
) -> AuditLogListResponse:
    """List audit entries for the resolved tenant (paginated, optional filters)."""
    if start_date and end_date and end_date < start_date:
        raise ValidationException("end_date must not be before start_date", field="end_date")
    query = AuditLogQuery(
        tenant_id=tenant_id,
        user_id=user_id,
        resource=resource,
        action=action,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    items = await recorder.list(query)
    total = await recorder.count(query)
    return AuditLogListResponse(
        audit_logs=[AuditLogEntryResponse.model_validate(e) for e in items],
        count=len(items),
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/resources/{resource}/{resource_id}", response_model=AuditLogHistoryResponse)
async def resource_history(
    resource: str,
    resource_id: str,
    _: Annotated[Caller, Depends(_require_audit_reader)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
    limit: int = Query(50, ge=1, le=500),
) -> AuditLogHistoryResponse:
    """History of one resource in the resolved tenant."""
    items = await recorder.list_for_resource(tenant_id, resource, resource_id, limit=limit)
    return AuditLogHistoryResponse(
        audit_logs=[AuditLogEntryResponse.model_validate(e) for e in items],
        count=len(items),
        limit=limit,
    )


@router.get("/users/{user_id}", response_model=AuditLogHistoryResponse)
async def user_activity(
    user_id: str,
    _: Annotated[Caller, Depends(_require_audit_reader)],
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    recorder: Annotated[AuditRecorder, Depends(get_audit_recorder)],
    limit: int = Query(100, ge=1, le=500),
) -> AuditLogHistoryResponse:
    items = await recorder.list_user_activity(tenant_id, user_id, limit=limit)
    return AuditLogHistoryResponse(
        audit_logs=[AuditLogEntryResponse.model_validate(e) for e in items],
        count=len(items),
        limit=limit,
    )
