"""Role assignment repository (admin_user rows). Implements IRoleAssignmentRepository."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.application.dtos.rbac import RoleAssignmentResult, UserRoleGrant
from tenancy.infrastructure.persistence.models.admin_user import AdminUser
from tenancy.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _orm_to_result(row: AdminUser) -> RoleAssignmentResult:
    """Map ORM to application DTO."""
    return RoleAssignmentResult(
        id=row.id,
        user_id=row.user_id,
        tenant_id=row.tenant_id,
        role=row.role,
        email=row.email,
        is_active=row.is_active,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
    )


def _pair_filter(user_id: str, tenant_id: str | None):
    if tenant_id is None:
        return (AdminUser.user_id == user_id, AdminUser.tenant_id.is_(None))
    return (AdminUser.user_id == user_id, AdminUser.tenant_id == tenant_id)


class RoleAssignmentRepository:
    """Role assignments keyed by (user_id, tenant_id). Rows are deactivated, not deleted."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_active_grants(self, user_id: str) -> list[UserRoleGrant]:
        """Active (role, tenant_id) pairs for user. Always read from the store."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(AdminUser.role, AdminUser.tenant_id).where(
                    AdminUser.user_id == user_id, AdminUser.is_active.is_(True)
                )
            )
            return [UserRoleGrant(role=r.role, tenant_id=r.tenant_id) for r in result.all()]

    async def upsert(
        self, user_id: str, tenant_id: str | None, role: str, email: str | None
    ) -> tuple[RoleAssignmentResult, str | None]:
        """Insert or supersede the (user, tenant) row and reactivate it.

        Returns:
            (row, previous role) where previous role is None on insert.
        """
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                select(AdminUser).where(*_pair_filter(user_id, tenant_id)).with_for_update()
            )
            row = result.scalar_one_or_none()
            previous: str | None = None
            if row is None:
                row = AdminUser(
                    user_id=user_id,
                    tenant_id=tenant_id,
                    role=role,
                    email=email,
                    is_active=True,
                )
                session.add(row)
            else:
                previous = row.role
                row.role = role
                row.is_active = True
                if email is not None:
                    row.email = email
            await session.flush()
            await session.refresh(row)
            return _orm_to_result(row), previous

    async def deactivate(
        self, user_id: str, tenant_id: str | None
    ) -> RoleAssignmentResult | None:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                select(AdminUser).where(*_pair_filter(user_id, tenant_id))
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            row.is_active = False
            await session.flush()
            await session.refresh(row)
            return _orm_to_result(row)

    async def update_role(
        self, user_id: str, tenant_id: str | None, role: str
    ) -> tuple[RoleAssignmentResult, str] | None:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                select(AdminUser).where(
                    *_pair_filter(user_id, tenant_id), AdminUser.is_active.is_(True)
                )
            )
            row = result.scalar_one_or_none()
            if row is None:
                return None
            previous = row.role
            row.role = role
            await session.flush()
            await session.refresh(row)
            return _orm_to_result(row), previous

    async def list_for_user(self, user_id: str) -> list[RoleAssignmentResult]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AdminUser)
                .where(AdminUser.user_id == user_id, AdminUser.is_active.is_(True))
                .order_by(AdminUser.created_at.desc())
            )
            return [_orm_to_result(r) for r in result.scalars().all()]

    async def list_for_tenant(self, tenant_id: str) -> list[RoleAssignmentResult]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AdminUser)
                .where(AdminUser.tenant_id == tenant_id, AdminUser.is_active.is_(True))
                .order_by(AdminUser.created_at.desc())
            )
            return [_orm_to_result(r) for r in result.scalars().all()]

    async def count_active(self, user_id: str | None = None) -> int:
        stmt = select(func.count()).select_from(AdminUser).where(AdminUser.is_active.is_(True))
        if user_id is not None:
            stmt = stmt.where(AdminUser.user_id == user_id)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())
