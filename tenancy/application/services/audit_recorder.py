"""Audit recorder: sanitized, non-blocking writes to the append-only audit trail.

record() never raises. Persistence failures are logged and dropped so an
audit problem can never abort the operation that triggered it. submit()
schedules record() as a tracked background task; drain() waits for the
outstanding ones (called from the app lifespan on shutdown).

Writes are best effort: entries still pending when the process dies are lost.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from tenancy.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogQuery,
    AuditLogResult,
)
from tenancy.application.dtos.rbac import AccessDecision
from tenancy.application.interfaces.repositories import IAuditLogRepository
from tenancy.domain.enums import AuditAction
from tenancy.domain.exceptions import AuditWriteFailure
from tenancy.shared.utils.sanitization import DEFAULT_MARKER, redact_sensitive

logger = logging.getLogger(__name__)

# Actions whose request payload is stored under metadata["changes"].
_CHANGE_ACTIONS = frozenset({AuditAction.CREATE.value, AuditAction.UPDATE.value})


def _as_str(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class AuditRecorder:
    """Writes audit entries through IAuditLogRepository and serves the read side."""

    def __init__(
        self,
        repo: IAuditLogRepository,
        *,
        enabled: bool = True,
        recursive_redaction: bool = True,
        redaction_marker: str = DEFAULT_MARKER,
    ) -> None:
        self._repo = repo
        self._enabled = enabled
        self._recursive = recursive_redaction
        self._marker = redaction_marker
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def sanitize(self, metadata: dict[str, Any] | None) -> dict[str, Any] | None:
        """Return metadata with sensitive field values replaced by the marker."""
        return redact_sensitive(
            metadata, recursive=self._recursive, marker=self._marker
        )

    async def record(self, entry: AuditLogEntryCreate) -> None:
        """Persist a sanitized copy of entry. Never raises to the caller."""
        if not self._enabled:
            return
        try:
            sanitized = AuditLogEntryCreate(
                tenant_id=entry.tenant_id,
                user_id=entry.user_id,
                action=_as_str(entry.action),
                resource=_as_str(entry.resource),
                resource_id=entry.resource_id,
                metadata=self.sanitize(entry.metadata),
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
            )
            await self._repo.create(sanitized)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failure = AuditWriteFailure(
                entry.tenant_id, _as_str(entry.action), _as_str(entry.resource), str(exc)
            )
            logger.warning("%s", failure.message, exc_info=True)

    def submit(self, entry: AuditLogEntryCreate) -> None:
        """Schedule record(entry) without waiting for it. Requires a running loop."""
        if not self._enabled:
            return
        task = asyncio.get_running_loop().create_task(self.record(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for scheduled writes. Writes still running after timeout are cancelled."""
        if not self._pending:
            return
        tasks = list(self._pending)
        done, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            logger.warning("Dropped %s pending audit writes at shutdown", len(still_running))
        logger.info("Drained %s audit writes", len(done))

    # Read side

    async def list(self, query: AuditLogQuery) -> list[AuditLogResult]:
        """Entries for query.tenant_id, newest first, paginated by limit/offset."""
        return await self._repo.list(query)

    async def count(self, query: AuditLogQuery) -> int:
        return await self._repo.count(query)

    async def list_for_resource(
        self, tenant_id: str, resource: str, resource_id: str, limit: int = 50
    ) -> list[AuditLogResult]:
        """History of one resource within a tenant."""
        return await self._repo.list(
            AuditLogQuery(
                tenant_id=tenant_id,
                resource=resource,
                resource_id=resource_id,
                limit=limit,
            )
        )

    async def list_user_activity(
        self, tenant_id: str, user_id: str, limit: int = 100
    ) -> list[AuditLogResult]:
        return await self._repo.list(
            AuditLogQuery(tenant_id=tenant_id, user_id=user_id, limit=limit)
        )


class MutationAuditHook:
    """Post-commit audit hook bound to one request.

    Business code calls committed() after it decides the mutation succeeded,
    passing the outcome directly. Tenant, user and transport metadata are
    captured when the hook is built for the request.
    """

    def __init__(
        self,
        recorder: AuditRecorder,
        *,
        tenant_id: str,
        user_id: str | None,
        ip_address: str | None = None,
        user_agent: str | None = None,
        method: str | None = None,
        path: str | None = None,
    ) -> None:
        self._recorder = recorder
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.ip_address = ip_address
        self.user_agent = user_agent
        self.method = method
        self.path = path
        self.rbac_check: dict[str, Any] | None = None

    def note_access(self, decision: AccessDecision, resource: str | Enum, action: str | Enum) -> None:
        """Attach the permission decision that admitted this request (informational)."""
        self.rbac_check = decision.to_metadata(_as_str(resource), _as_str(action))

    def build_entry(
        self,
        action: str | Enum,
        resource: str | Enum,
        resource_id: str | None = None,
        changes: Mapping[str, Any] | None = None,
        status_code: int = 200,
        extra: Mapping[str, Any] | None = None,
    ) -> AuditLogEntryCreate:
        action_name = _as_str(action)
        metadata: dict[str, Any] = {"status_code": status_code}
        if self.method:
            metadata["method"] = self.method
        if self.path:
            metadata["path"] = self.path
        if self.rbac_check is not None:
            metadata["rbac_check"] = self.rbac_check
        if changes and action_name in _CHANGE_ACTIONS:
            metadata["changes"] = dict(changes)
        if extra:
            metadata.update(extra)
        return AuditLogEntryCreate(
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            action=action_name,
            resource=_as_str(resource),
            resource_id=resource_id,
            metadata=metadata,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
        )

    def committed(
        self,
        action: str | Enum,
        resource: str | Enum,
        resource_id: str | None = None,
        changes: Mapping[str, Any] | None = None,
        status_code: int = 200,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        """Schedule the audit write for a successful mutation. Non-2xx outcomes are not recorded."""
        if not 200 <= status_code < 300:
            return
        self._recorder.submit(
            self.build_entry(action, resource, resource_id, changes, status_code, extra)
        )
