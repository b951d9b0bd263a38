"""DTOs for the audit trail."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class AuditLogEntryCreate:
    """Input for appending one audit record. Append-only; no update.

    user_id is None for system actions. metadata is sanitized by
    AuditRecorder before it reaches the repository.
    """

    tenant_id: str
    user_id: str | None
    action: str
    resource: str
    resource_id: str | None = None
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class AuditLogResult:
    """Single audit entry (read-model for list/get)."""

    id: str
    tenant_id: str
    user_id: str | None
    action: str
    resource: str
    resource_id: str | None
    metadata: dict[str, Any] | None
    ip_address: str | None
    user_agent: str | None
    created_at: datetime


@dataclass(frozen=True)
class AuditLogQuery:
    """Read-side filters. tenant_id is mandatory; the rest narrow the result."""

    tenant_id: str
    user_id: str | None = None
    resource: str | None = None
    action: str | None = None
    resource_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    limit: int = 100
    offset: int = 0
