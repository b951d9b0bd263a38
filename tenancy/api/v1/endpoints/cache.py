"""Cache inspection and manual clear-all (GlobalAdmin only)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from tenancy.api.v1.dependencies import Caller, get_cache, require_role
from tenancy.domain.enums import Role
from tenancy.infrastructure.cache import CacheService
from tenancy.schemas.rbac import CacheClearResponse, CacheStatsResponse

router = APIRouter()

_require_global_admin = require_role(Role.GLOBAL_ADMIN)


@router.get("", response_model=CacheStatsResponse)
async def cache_stats(
    _: Annotated[Caller, Depends(_require_global_admin)],
    cache: Annotated[CacheService, Depends(get_cache)],
) -> CacheStatsResponse:
    return CacheStatsResponse(**cache.stats())


@router.delete("", response_model=CacheClearResponse)
async def clear_cache(
    _: Annotated[Caller, Depends(_require_global_admin)],
    cache: Annotated[CacheService, Depends(get_cache)],
) -> CacheClearResponse:
    """Drop every cached tenant lookup and policy list."""
    size = cache.stats()["size"]
    cache.clear()
    return CacheClearResponse(cleared=size)
