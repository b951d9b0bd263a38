"""Composition root: builds the service graph once per process.

The lifespan calls build_sql_services() and stores the container on
app.state.services. Tests call build_services() with in-memory repositories.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tenancy.application.interfaces.repositories import (
    IAuditLogRepository,
    IPolicyRepository,
    IRoleAssignmentRepository,
    ITenantRepository,
)
from tenancy.application.services import (
    AuditRecorder,
    PermissionEngine,
    PolicyAdminService,
    RoleAssignmentService,
    TenantResolver,
)
from tenancy.core.config import Settings
from tenancy.infrastructure.cache import CacheService
from tenancy.infrastructure.persistence.repositories import (
    AuditLogRepository,
    PolicyRepository,
    RoleAssignmentRepository,
    TenantRepository,
)


@dataclass
class ServiceContainer:
    """Process-wide services. One cache instance is shared by resolver and engine."""

    cache: CacheService
    tenant_resolver: TenantResolver
    permission_engine: PermissionEngine
    audit_recorder: AuditRecorder
    role_assignments: RoleAssignmentService
    policies: PolicyAdminService

    async def shutdown(self, audit_drain_timeout: float | None = 10.0) -> None:
        """Flush pending audit writes, then drop cached state."""
        await self.audit_recorder.drain(timeout=audit_drain_timeout)
        await self.cache.shutdown()


def build_services(
    settings: Settings,
    *,
    tenant_repo: ITenantRepository,
    assignment_repo: IRoleAssignmentRepository,
    policy_repo: IPolicyRepository,
    audit_repo: IAuditLogRepository,
    cache: CacheService | None = None,
) -> ServiceContainer:
    """Wire services from repositories and settings."""
    cache = cache or CacheService(coalesce_fetches=settings.cache_coalesce_fetches)
    engine = PermissionEngine(
        assignment_repo,
        policy_repo,
        cache,
        policy_ttl=settings.cache_ttl_policies,
    )
    return ServiceContainer(
        cache=cache,
        tenant_resolver=TenantResolver(
            tenant_repo,
            cache,
            default_tenant_id=settings.default_tenant_id,
            ttl=settings.cache_ttl_tenants,
        ),
        permission_engine=engine,
        audit_recorder=AuditRecorder(
            audit_repo,
            enabled=settings.audit_enabled,
            recursive_redaction=settings.audit_recursive_redaction,
            redaction_marker=settings.audit_redaction_marker,
        ),
        role_assignments=RoleAssignmentService(
            assignment_repo, engine, default_tenant_id=settings.default_tenant_id
        ),
        policies=PolicyAdminService(policy_repo, engine),
    )


def build_sql_services(
    settings: Settings, session_factory: async_sessionmaker[AsyncSession]
) -> ServiceContainer:
    """Wire services backed by the SQLAlchemy repositories."""
    return build_services(
        settings,
        tenant_repo=TenantRepository(session_factory),
        assignment_repo=RoleAssignmentRepository(session_factory),
        policy_repo=PolicyRepository(session_factory),
        audit_repo=AuditLogRepository(session_factory),
    )
