"""Seed the headquarters tenant, default role policies and (optionally) the first GlobalAdmin.

Usage:
    uv run python -m scripts.seed_rbac [--create-tables] [admin_user_id [admin_email]]

--create-tables runs Base.metadata.create_all first (dev databases only;
real schemas are managed outside this service). With admin_user_id, the user
becomes GlobalAdmin if no active assignment exists yet, and a bearer token
for it is printed. Idempotent: existing tenant and policies are left alone.
"""

import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import select

from tenancy.application.dtos.rbac import PolicyCreate
from tenancy.core.composition import build_sql_services
from tenancy.core.config import get_settings
from tenancy.domain.enums import Action, Resource, Role, TenantStatus
from tenancy.infrastructure.persistence import models
from tenancy.infrastructure.persistence.database import (
    Base,
    dispose_engine,
    get_session_factory,
)
from tenancy.infrastructure.security.jwt import create_access_token

DEFAULT_POLICIES: list[tuple[Role, Resource, list[Action]]] = [
    (Role.TENANT_ADMIN, Resource.ANY, [Action.ANY]),
    (Role.CATALOG_MGR, Resource.PRODUCT, [Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE]),
    (
        Role.ORDER_OPS,
        Resource.ORDER,
        [Action.READ, Action.UPDATE, Action.CANCEL, Action.FULFILL, Action.REFUND],
    ),
    (Role.ORDER_OPS, Resource.CUSTOMER, [Action.READ]),
    (Role.READ_ONLY, Resource.ANY, [Action.READ]),
]


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=True)


async def _ensure_default_tenant(tenant_id: str) -> None:
    session_factory = get_session_factory()
    async with session_factory() as session, session.begin():
        existing = await session.get(models.Tenant, tenant_id)
        if existing is not None:
            print(f"Tenant {tenant_id} already exists")
            return
        session.add(
            models.Tenant(
                id=tenant_id,
                name="Headquarters",
                default_locale="en",
                currency_code="eur",
                capabilities={},
                status=TenantStatus.ACTIVE.value,
            )
        )
        print(f"Created tenant {tenant_id}")


async def _existing_policy_keys() -> set[tuple[str, str]]:
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(
            select(models.RbacPolicy.role, models.RbacPolicy.resource)
        )
        return {(r.role, r.resource) for r in result.all()}


async def main() -> None:
    """Seed tenant, policies and optional first admin."""
    _load_env()
    args = sys.argv[1:]
    create_tables = "--create-tables" in args
    positional = [a for a in args if not a.startswith("--")]

    settings = get_settings()
    session_factory = get_session_factory()

    if create_tables:
        from tenancy.infrastructure.persistence import database

        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("Tables created")

    await _ensure_default_tenant(settings.default_tenant_id)

    services = build_sql_services(settings, session_factory)
    existing = await _existing_policy_keys()
    for role, resource, actions in DEFAULT_POLICIES:
        if (role.value, resource.value) in existing:
            continue
        policy = await services.policies.create_policy(
            PolicyCreate(
                role=role.value,
                resource=resource.value,
                actions=[a.value for a in actions],
            )
        )
        print(f"Created policy {policy.id}: {role.value} -> {resource.value}")

    if positional:
        user_id = positional[0]
        email = positional[1] if len(positional) > 1 else None
        row = await services.role_assignments.ensure_first_user_is_global_admin(
            user_id, email
        )
        if row is None:
            print("Users already exist; no GlobalAdmin assigned", file=sys.stderr)
        else:
            print(f"Assigned GlobalAdmin to {user_id}")
        print(f"Bearer token for {user_id}: {create_access_token({'sub': user_id})}")

    await services.shutdown()
    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
