"""Request/response schemas for audit log API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class AuditLogEntryResponse(BaseModel):
    """Single audit log entry (read)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    user_id: str | None
    action: str
    resource: str
    resource_id: str | None
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Newest-first page of audit entries. count is the page size, total the match count."""

    audit_logs: list[AuditLogEntryResponse]
    count: int
    total: int
    limit: int
    offset: int


class AuditLogHistoryResponse(BaseModel):
    """Resource history or user activity (no pagination beyond limit)."""

    audit_logs: list[AuditLogEntryResponse]
    count: int
    limit: int
