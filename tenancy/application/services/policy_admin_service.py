"""Policy administration. The only write path for rbac_policy rows."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from tenancy.application.dtos.rbac import PolicyCreate, PolicyResult, PolicyUpdate
from tenancy.application.interfaces.repositories import IPolicyRepository
from tenancy.application.services.permission_engine import PermissionEngine
from tenancy.domain.enums import Action, Resource, Role
from tenancy.domain.exceptions import ResourceNotFoundException, ValidationException
from tenancy.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


def _validate(role: str | None, resource: str | None, actions: list[str] | None) -> None:
    if role is not None and role not in Role.values():
        raise ValidationException(f"Unknown role: {role}", field="role")
    if role == Role.GLOBAL_ADMIN.value:
        raise ValidationException(
            "GlobalAdmin is granted implicitly and takes no policies", field="role"
        )
    if resource is not None and resource not in Resource.values():
        raise ValidationException(f"Unknown resource: {resource}", field="resource")
    if actions is not None:
        if not actions:
            raise ValidationException("actions must not be empty", field="actions")
        unknown = [a for a in actions if a not in Action.values()]
        if unknown:
            raise ValidationException(
                f"Unknown actions: {', '.join(unknown)}", field="actions"
            )


class PolicyAdminService:
    """Create, update and expire policies, invalidating affected role caches."""

    def __init__(
        self,
        repo: IPolicyRepository,
        engine: PermissionEngine,
        *,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repo
        self._engine = engine
        self._now = now

    async def list_effective(self) -> list[PolicyResult]:
        return await self._repo.list_effective(self._now())

    async def get_policy(self, policy_id: str) -> PolicyResult:
        policy = await self._repo.get_by_id(policy_id)
        if policy is None:
            raise ResourceNotFoundException("policy", policy_id)
        return policy

    async def create_policy(self, data: PolicyCreate) -> PolicyResult:
        _validate(data.role, data.resource, data.actions)
        start = ensure_utc(data.effective_from)
        end = ensure_utc(data.effective_until)
        if start is not None and end is not None and end <= start:
            raise ValidationException(
                "effective_until must be after effective_from", field="effective_until"
            )
        policy = await self._repo.create(data)
        self._engine.invalidate_roles(policy.role)
        logger.info(
            "Created policy %s: %s may %s on %s",
            policy.id,
            policy.role,
            ",".join(policy.actions),
            policy.resource,
        )
        return policy

    async def update_policy(self, policy_id: str, data: PolicyUpdate) -> PolicyResult:
        """Apply a partial update (version is bumped by the repository).

        Raises:
            ResourceNotFoundException: If the policy does not exist.
        """
        _validate(data.role, data.resource, data.actions)
        current = await self.get_policy(policy_id)
        end = ensure_utc(data.effective_until)
        if end is not None and end <= current.effective_from:
            raise ValidationException(
                "effective_until must be after effective_from", field="effective_until"
            )
        policy = await self._repo.update(policy_id, data)
        if policy is None:
            raise ResourceNotFoundException("policy", policy_id)
        self._engine.invalidate_roles(current.role, policy.role)
        return policy

    async def expire_policy(self, policy_id: str) -> PolicyResult:
        """End the policy's validity window now. The row is kept for history."""
        current = await self.get_policy(policy_id)
        now = self._now()
        policy = await self._repo.update(
            policy_id, PolicyUpdate(effective_until=max(now, current.effective_from))
        )
        if policy is None:
            raise ResourceNotFoundException("policy", policy_id)
        self._engine.invalidate_roles(policy.role)
        logger.info("Expired policy %s (role %s)", policy_id, policy.role)
        return policy

