"""Service providers. Services live on app.state.services (built in the lifespan)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from tenancy.application.services import (
    AuditRecorder,
    PermissionEngine,
    PolicyAdminService,
    RoleAssignmentService,
    TenantResolver,
)
from tenancy.core.composition import ServiceContainer
from tenancy.infrastructure.cache import CacheService


def get_services(request: Request) -> ServiceContainer:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services are not initialized; is the app lifespan running?")
    return services


Services = Annotated[ServiceContainer, Depends(get_services)]


def get_tenant_resolver(services: Services) -> TenantResolver:
    return services.tenant_resolver


def get_permission_engine(services: Services) -> PermissionEngine:
    return services.permission_engine


def get_audit_recorder(services: Services) -> AuditRecorder:
    return services.audit_recorder


def get_role_assignment_service(services: Services) -> RoleAssignmentService:
    return services.role_assignments


def get_policy_admin_service(services: Services) -> PolicyAdminService:
    return services.policies


def get_cache(services: Services) -> CacheService:
    return services.cache
