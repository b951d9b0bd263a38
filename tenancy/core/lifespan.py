"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring. Startup builds the service
graph (cache, resolver, engine, audit recorder, admin services) once and
stores it on app.state.services. Shutdown drains pending audit writes,
shuts the cache down and disposes the SQL engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from tenancy.core.composition import build_sql_services
from tenancy.core.config import get_settings
from tenancy.infrastructure.persistence.database import dispose_engine, get_session_factory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown."""
    settings = get_settings()

    # ---- Startup ----
    if getattr(app.state, "services", None) is None:
        app.state.services = build_sql_services(settings, get_session_factory())
        logger.info(
            "Services started (default tenant=%s, tenant TTL=%ss, policy TTL=%ss)",
            settings.default_tenant_id,
            settings.cache_ttl_tenants,
            settings.cache_ttl_policies,
        )

    yield

    # ---- Shutdown ----
    services = getattr(app.state, "services", None)
    if services is not None:
        await services.shutdown(audit_drain_timeout=settings.audit_drain_timeout)
        app.state.services = None
        logger.info("Services stopped")

    await dispose_engine()
