"""Permission engine: role assignments plus cached policy rows decide access.

Allow-list evaluation. A user is allowed when any one of their roles has a
matching, condition-satisfying policy (OR across roles, first match per
role). Role assignments are read fresh on every call; policy lists are
cached per role under policies:<role>.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from tenancy.application.dtos.rbac import AccessDecision, PolicyResult, UserRoleGrant
from tenancy.application.interfaces.repositories import (
    IPolicyRepository,
    IRoleAssignmentRepository,
)
from tenancy.application.interfaces.services import ICacheService
from tenancy.core.constants import WILDCARD
from tenancy.domain.enums import Role
from tenancy.infrastructure.cache.keys import policies_key, policies_prefix
from tenancy.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

REASON_NO_ROLES = "no roles assigned"


def _as_str(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def policy_matches(policy: PolicyResult, resource: str, action: str) -> bool:
    """True if policy covers (resource, action), honoring the wildcard."""
    if policy.resource != WILDCARD and policy.resource != resource:
        return False
    return WILDCARD in policy.actions or action in policy.actions


class PermissionEngine:
    """Evaluates access for (user, tenant, resource, action)."""

    def __init__(
        self,
        assignment_repo: IRoleAssignmentRepository,
        policy_repo: IPolicyRepository,
        cache: ICacheService,
        *,
        policy_ttl: float = 300,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._assignments = assignment_repo
        self._policies = policy_repo
        self._cache = cache
        self._policy_ttl = policy_ttl
        self._now = now
        # Bumped on every invalidation; a load that straddles one must not cache its result.
        self._generation = 0

    async def get_user_roles(self, user_id: str) -> list[UserRoleGrant]:
        """Active (role, tenant) grants for user. Never cached."""
        return await self._assignments.get_active_grants(user_id)

    @staticmethod
    def _grants_tenant(grants: Iterable[UserRoleGrant], tenant_id: str) -> bool:
        return any(
            g.role == Role.GLOBAL_ADMIN.value or g.tenant_id == tenant_id for g in grants
        )

    async def can_access_tenant(self, user_id: str, tenant_id: str) -> bool:
        return self._grants_tenant(await self.get_user_roles(user_id), tenant_id)

    async def get_allowed_tenants(self, user_id: str) -> list[str]:
        """Distinct tenant ids from active assignments, in first-seen order."""
        seen: dict[str, None] = {}
        for grant in await self.get_user_roles(user_id):
            if grant.tenant_id:
                seen.setdefault(grant.tenant_id, None)
        return list(seen)

    async def _load_policies(self, role: str) -> tuple[PolicyResult, ...]:
        """Load all effective policies, prime every role's cache key, return role's list."""
        generation = self._generation
        rows = await self._policies.list_effective(self._now())
        grouped: dict[str, list[PolicyResult]] = {}
        for row in rows:
            grouped.setdefault(row.role, []).append(row)
        if generation != self._generation:
            logger.debug("Policies invalidated during load; skipping cache priming")
            return tuple(grouped.get(role, ()))
        for other_role, policies in grouped.items():
            if other_role != role:
                self._cache.set(policies_key(other_role), tuple(policies), self._policy_ttl)
        logger.debug("Loaded %s effective policies for %s roles", len(rows), len(grouped))
        return tuple(grouped.get(role, ()))

    async def get_role_policies(self, role: str | Enum) -> tuple[PolicyResult, ...]:
        """Effective policies for role (cached per role)."""
        role_name = _as_str(role)
        generation = self._generation
        policies = await self._cache.get_or_fetch(
            policies_key(role_name),
            lambda: self._load_policies(role_name),
            self._policy_ttl,
        )
        if generation != self._generation:
            self._cache.invalidate(policies_key(role_name))
        return policies

    async def has_permission(
        self,
        role: str | Enum,
        resource: str | Enum,
        action: str | Enum,
        context: Mapping[str, Any] | None = None,
    ) -> bool:
        """True if role grants action on resource under context.

        GlobalAdmin always passes. Policies whose conditions do not hold
        against context are skipped, and evaluation moves on.
        """
        role_name = _as_str(role)
        if role_name == Role.GLOBAL_ADMIN.value:
            return True
        resource_name = _as_str(resource)
        action_name = _as_str(action)
        for policy in await self.get_role_policies(role_name):
            if not policy_matches(policy, resource_name, action_name):
                continue
            if policy.conditions.evaluate(context):
                return True
        return False

    async def verify_access(
        self,
        user_id: str,
        tenant_id: str,
        resource: str | Enum,
        action: str | Enum,
        context: Mapping[str, Any] | None = None,
    ) -> AccessDecision:
        """Decide whether user may perform action on resource in tenant.

        Returns:
            AccessDecision; reason is set when denied.
        """
        resource_name = _as_str(resource)
        action_name = _as_str(action)
        grants = await self.get_user_roles(user_id)
        if not grants:
            return AccessDecision(allowed=False, reason=REASON_NO_ROLES)
        if not self._grants_tenant(grants, tenant_id):
            return AccessDecision(
                allowed=False, reason=f"no access to tenant '{tenant_id}'"
            )
        seen_roles: set[str] = set()
        for grant in grants:
            if grant.role in seen_roles:
                continue
            seen_roles.add(grant.role)
            if await self.has_permission(grant.role, resource_name, action_name, context):
                return AccessDecision(allowed=True)
        logger.info(
            "Access denied: user=%s tenant=%s %s on %s",
            user_id,
            tenant_id,
            action_name,
            resource_name,
        )
        return AccessDecision(
            allowed=False,
            reason=f"no permission to '{action_name}' on '{resource_name}'",
        )

    @staticmethod
    def has_any_role(
        user_roles: Iterable[UserRoleGrant | str], allowed_roles: Iterable[str | Enum]
    ) -> bool:
        """True if any held role is in allowed_roles."""
        allowed = {_as_str(r) for r in allowed_roles}
        for held in user_roles:
            name = held.role if isinstance(held, UserRoleGrant) else _as_str(held)
            if name in allowed:
                return True
        return False

    def invalidate_roles(self, *roles: str | Enum | None) -> None:
        """Drop cached policy lists for roles (None entries ignored)."""
        self._generation += 1
        for role in roles:
            if role:
                self._cache.invalidate(policies_key(_as_str(role)))

    def clear_cache(self) -> int:
        """Drop every cached policy list. Returns number of keys removed."""
        self._generation += 1
        removed = self._cache.invalidate_prefix(policies_prefix())
        logger.warning("Policy cache cleared (%s roles)", removed)
        return removed
