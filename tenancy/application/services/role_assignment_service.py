"""Role assignment administration (admin_user rows).

Every change that can alter what a role grants invalidates that role's
cached policy list, for both the old and the new role.
"""

from __future__ import annotations

import logging
from enum import Enum

from tenancy.application.dtos.rbac import RoleAssignmentResult
from tenancy.application.interfaces.repositories import IRoleAssignmentRepository
from tenancy.application.services.permission_engine import PermissionEngine
from tenancy.domain.enums import Role
from tenancy.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)


def _role_name(role: str | Enum) -> str:
    name = role.value if isinstance(role, Enum) else str(role)
    if name not in Role.values():
        raise ValidationException(f"Unknown role: {name}", field="role")
    return name


class RoleAssignmentService:
    """Assign, change and revoke user roles per tenant."""

    def __init__(
        self,
        repo: IRoleAssignmentRepository,
        engine: PermissionEngine,
        *,
        default_tenant_id: str = "hq",
    ) -> None:
        self._repo = repo
        self._engine = engine
        self._default_tenant_id = default_tenant_id

    async def assign_user_to_tenant(
        self,
        user_id: str,
        tenant_id: str | None,
        role: str | Enum,
        email: str | None = None,
    ) -> RoleAssignmentResult:
        """Upsert the (user, tenant) assignment. An existing row gets the new role and is reactivated."""
        role_name = _role_name(role)
        row, previous = await self._repo.upsert(user_id, tenant_id, role_name, email)
        self._engine.invalidate_roles(previous, role_name)
        logger.info(
            "Assigned role %s to user %s on tenant %s (previous: %s)",
            role_name,
            user_id,
            tenant_id,
            previous,
        )
        return row

    async def remove_user_from_tenant(
        self, user_id: str, tenant_id: str | None
    ) -> RoleAssignmentResult:
        """Deactivate the assignment.

        Raises:
            ResourceNotFoundException: If the user has no assignment in tenant.
        """
        row = await self._repo.deactivate(user_id, tenant_id)
        if row is None:
            raise ResourceNotFoundException("role_assignment", f"{user_id}@{tenant_id}")
        self._engine.invalidate_roles(row.role)
        logger.info("Removed user %s from tenant %s", user_id, tenant_id)
        return row

    async def update_user_role(
        self, user_id: str, tenant_id: str | None, role: str | Enum
    ) -> RoleAssignmentResult:
        """Change the role of an active assignment.

        Raises:
            ResourceNotFoundException: If no active assignment exists.
        """
        role_name = _role_name(role)
        updated = await self._repo.update_role(user_id, tenant_id, role_name)
        if updated is None:
            raise ResourceNotFoundException("role_assignment", f"{user_id}@{tenant_id}")
        row, previous = updated
        self._engine.invalidate_roles(previous, role_name)
        return row

    async def get_user_tenants(self, user_id: str) -> list[RoleAssignmentResult]:
        return await self._repo.list_for_user(user_id)

    async def get_assignment(
        self, user_id: str, tenant_id: str | None
    ) -> RoleAssignmentResult | None:
        """The user's active assignment in tenant, if any."""
        for row in await self._repo.list_for_user(user_id):
            if row.tenant_id == tenant_id:
                return row
        return None

    async def get_tenant_users(self, tenant_id: str) -> list[RoleAssignmentResult]:
        return await self._repo.list_for_tenant(tenant_id)

    async def user_exists(self, user_id: str) -> bool:
        """True if user holds at least one active assignment."""
        return await self._repo.count_active(user_id) > 0

    async def ensure_first_user_is_global_admin(
        self, user_id: str, email: str | None = None
    ) -> RoleAssignmentResult | None:
        """Make user GlobalAdmin on the default tenant when no active assignment exists yet.

        Returns the new assignment, or None when the system already has users.
        """
        if await self._repo.count_active() > 0:
            return None
        row = await self.assign_user_to_tenant(
            user_id, self._default_tenant_id, Role.GLOBAL_ADMIN, email
        )
        logger.warning("First user %s assigned as GlobalAdmin", user_id)
        return row
