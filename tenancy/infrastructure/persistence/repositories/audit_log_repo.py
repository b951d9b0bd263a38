"""Audit log repository. Append-only; implements IAuditLogRepository."""

from __future__ import annotations

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.application.dtos.audit_log import (
    AuditLogEntryCreate,
    AuditLogQuery,
    AuditLogResult,
)
from tenancy.infrastructure.persistence.models.audit_log import AuditLog
from tenancy.shared.utils.datetime import ensure_utc
from tenancy.shared.utils.generators import generate_cuid


def _orm_to_result(row: AuditLog) -> AuditLogResult:
    """Map ORM to application DTO."""
    return AuditLogResult(
        id=row.id,
        tenant_id=row.tenant_id,
        user_id=row.user_id,
        action=row.action,
        resource=row.resource,
        resource_id=row.resource_id,
        metadata=row.metadata_,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        created_at=ensure_utc(row.created_at),
    )


def _conditions(query: AuditLogQuery) -> list:
    conditions = [AuditLog.tenant_id == query.tenant_id]
    if query.user_id is not None:
        conditions.append(AuditLog.user_id == query.user_id)
    if query.resource is not None:
        conditions.append(AuditLog.resource == query.resource)
    if query.resource_id is not None:
        conditions.append(AuditLog.resource_id == query.resource_id)
    if query.action is not None:
        conditions.append(AuditLog.action == query.action)
    if query.start_date is not None:
        conditions.append(AuditLog.created_at >= query.start_date)
    if query.end_date is not None:
        conditions.append(AuditLog.created_at <= query.end_date)
    return conditions


class AuditLogRepository:
    """Append-only audit log repository. No update/delete."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create(self, entry: AuditLogEntryCreate) -> AuditLogResult:
        """Append one audit log entry; return created record."""
        async with self._session_factory() as session, session.begin():
            row = AuditLog(
                id=generate_cuid(),
                tenant_id=entry.tenant_id,
                user_id=entry.user_id,
                action=entry.action,
                resource=entry.resource,
                resource_id=entry.resource_id,
                metadata_=entry.metadata,
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
            )
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return _orm_to_result(row)

    async def list(self, query: AuditLogQuery) -> list[AuditLogResult]:
        """List entries for the query's tenant with optional filters (newest first)."""
        stmt = (
            select(AuditLog)
            .where(and_(*_conditions(query)))
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [_orm_to_result(r) for r in result.scalars().all()]

    async def count(self, query: AuditLogQuery) -> int:
        stmt = select(func.count()).select_from(AuditLog).where(and_(*_conditions(query)))
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())
