"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
services from tenancy.api.v1.dependencies (built once in the lifespan).
"""

from fastapi import APIRouter

from tenancy.api.v1.endpoints import (
    access,
    admin_users,
    audit_log,
    cache,
    health,
    policies,
    tenant_context,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tenant_context.store_router, prefix="/store", tags=["store"])
api_router.include_router(tenant_context.admin_router, prefix="/admin", tags=["tenant-context"])
api_router.include_router(audit_log.router, prefix="/admin/audit-logs", tags=["audit-logs"])
api_router.include_router(access.router, prefix="/admin/access-check", tags=["rbac"])
api_router.include_router(admin_users.router, prefix="/admin/users", tags=["rbac"])
api_router.include_router(policies.router, prefix="/admin/policies", tags=["rbac"])
api_router.include_router(cache.router, prefix="/admin/cache", tags=["cache"])
