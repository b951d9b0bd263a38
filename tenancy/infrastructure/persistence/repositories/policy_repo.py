"""RBAC policy repository. Implements IPolicyRepository."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.application.dtos.rbac import PolicyCreate, PolicyResult, PolicyUpdate
from tenancy.domain.value_objects import PolicyConditions
from tenancy.infrastructure.persistence.models.rbac_policy import RbacPolicy
from tenancy.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def _orm_to_result(row: RbacPolicy) -> PolicyResult:
    """Map ORM to application DTO. Stored conditions are parsed into predicates."""
    return PolicyResult(
        id=row.id,
        role=row.role,
        resource=row.resource,
        actions=tuple(row.actions or ()),
        conditions=PolicyConditions.from_json(row.conditions),
        version=row.version,
        effective_from=ensure_utc(row.effective_from),
        effective_until=ensure_utc(row.effective_until),
    )


def _parse_effective(rows: Iterable[RbacPolicy]) -> list[PolicyResult]:
    """Map rows, skipping any whose stored conditions cannot be parsed.

    A skipped row grants nothing, so one corrupt policy never blocks
    evaluation of the others.
    """
    results: list[PolicyResult] = []
    for row in rows:
        try:
            results.append(_orm_to_result(row))
        except ValueError as e:
            logger.error(
                "Skipping policy %s (role %s): invalid conditions: %s", row.id, row.role, e
            )
    return results


class PolicyRepository:
    """Policy rows. Writes go through PolicyAdminService, which invalidates the cache."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_effective(self, at: datetime) -> list[PolicyResult]:
        """Policies with effective_from <= at < effective_until (or no end)."""
        stmt = (
            select(RbacPolicy)
            .where(
                RbacPolicy.effective_from <= at,
                or_(RbacPolicy.effective_until.is_(None), RbacPolicy.effective_until > at),
            )
            .order_by(RbacPolicy.role, RbacPolicy.resource, RbacPolicy.id)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return _parse_effective(result.scalars().all())

    async def get_by_id(self, policy_id: str) -> PolicyResult | None:
        async with self._session_factory() as session:
            row = await session.get(RbacPolicy, policy_id)
            return _orm_to_result(row) if row else None

    async def create(self, data: PolicyCreate) -> PolicyResult:
        async with self._session_factory() as session, session.begin():
            row = RbacPolicy(
                role=data.role,
                resource=data.resource,
                actions=list(data.actions),
                conditions=data.conditions.to_json(),
                version=1,
                effective_from=data.effective_from or utc_now(),
                effective_until=data.effective_until,
            )
            session.add(row)
            await session.flush()
            await session.refresh(row)
            return _orm_to_result(row)

    async def update(self, policy_id: str, data: PolicyUpdate) -> PolicyResult | None:
        """Apply non-None fields and bump version. None if the policy does not exist."""
        async with self._session_factory() as session, session.begin():
            row = await session.get(RbacPolicy, policy_id, with_for_update=True)
            if row is None:
                return None
            if data.role is not None:
                row.role = data.role
            if data.resource is not None:
                row.resource = data.resource
            if data.actions is not None:
                row.actions = list(data.actions)
            if data.conditions is not None:
                row.conditions = data.conditions.to_json()
            if data.effective_until is not None:
                row.effective_until = data.effective_until
            row.version = row.version + 1
            await session.flush()
            await session.refresh(row)
            return _orm_to_result(row)
