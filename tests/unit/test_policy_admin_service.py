"""Unit tests for PolicyAdminService (validation, versioning, cache invalidation)."""

from datetime import UTC, datetime, timedelta

import pytest

from tenancy.application.dtos.rbac import PolicyCreate, PolicyUpdate
from tenancy.application.services import PermissionEngine, PolicyAdminService
from tenancy.domain.exceptions import ResourceNotFoundException, ValidationException

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def engine(assignment_repo, policy_repo, cache) -> PermissionEngine:
    return PermissionEngine(assignment_repo, policy_repo, cache, now=lambda: NOW)


@pytest.fixture
def admin(policy_repo, engine) -> PolicyAdminService:
    return PolicyAdminService(policy_repo, engine, now=lambda: NOW)


async def test_create_policy_takes_effect_immediately(admin, engine) -> None:
    assert await engine.has_permission("CatalogMgr", "product", "update") is False
    await admin.create_policy(PolicyCreate(role="CatalogMgr", resource="product", actions=["update"]))
    assert await engine.has_permission("CatalogMgr", "product", "update") is True


@pytest.mark.parametrize(
    "data,field",
    [
        (PolicyCreate(role="Wizard", resource="product", actions=["read"]), "role"),
        (PolicyCreate(role="GlobalAdmin", resource="product", actions=["read"]), "role"),
        (PolicyCreate(role="ReadOnly", resource="spaceship", actions=["read"]), "resource"),
        (PolicyCreate(role="ReadOnly", resource="product", actions=[]), "actions"),
        (PolicyCreate(role="ReadOnly", resource="product", actions=["fly"]), "actions"),
        (
            PolicyCreate(
                role="ReadOnly",
                resource="product",
                actions=["read"],
                effective_from=NOW,
                effective_until=NOW - timedelta(days=1),
            ),
            "effective_until",
        ),
    ],
)
async def test_create_policy_validation(admin, data, field) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await admin.create_policy(data)
    assert exc_info.value.details == {"field": field}


async def test_update_bumps_version_and_invalidates_old_and_new_role(
    admin, engine, policy_repo, cache
) -> None:
    policy = policy_repo.add("CatalogMgr", "product", ["read"])
    policy_repo.add("OrderOps", "order", ["read"])
    await engine.get_role_policies("CatalogMgr")
    assert "policies:OrderOps" in cache.stats()["keys"]

    updated = await admin.update_policy(policy.id, PolicyUpdate(role="OrderOps"))

    assert updated.version == 2
    assert updated.role == "OrderOps"
    assert not any(k.startswith("policies:") for k in cache.stats()["keys"])
    assert await engine.has_permission("CatalogMgr", "product", "read") is False
    assert await engine.has_permission("OrderOps", "product", "read") is True


async def test_update_missing_policy_raises_not_found(admin) -> None:
    with pytest.raises(ResourceNotFoundException):
        await admin.update_policy("missing", PolicyUpdate(actions=["read"]))


async def test_expire_policy_removes_it_from_effective_set(admin, engine, policy_repo) -> None:
    policy = policy_repo.add("ReadOnly", "product", ["read"])
    assert await engine.has_permission("ReadOnly", "product", "read") is True

    expired = await admin.expire_policy(policy.id)

    assert expired.effective_until == NOW
    assert policy.id not in {p.id for p in await admin.list_effective()}
    assert await engine.has_permission("ReadOnly", "product", "read") is False
    # Kept for history
    assert (await admin.get_policy(policy.id)).id == policy.id


async def test_get_policy_not_found(admin) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await admin.get_policy("nope")
    assert exc_info.value.details["resource_type"] == "policy"
