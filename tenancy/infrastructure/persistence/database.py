"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

The relational store is reached only through query execution; schema
management is external. Engine and session factory are created lazily on
first use so import does not trigger Settings validation.

The engine's pool is the bounded shared resource: repositories open one
session per operation with ``async with`` so the connection is released on
every exit path, including errors.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from tenancy.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    pool_size = settings.db_pool_size if settings.db_pool_size is not None else 20
    max_overflow = (
        settings.db_max_overflow if settings.db_max_overflow is not None else 10
    )
    command_timeout = (
        settings.db_command_timeout
        if settings.db_command_timeout is not None
        else 10
    )
    connect_args: dict[str, Any] = {}
    if "asyncpg" in settings.database_url:
        connect_args["command_timeout"] = command_timeout
    engine = create_async_engine(
        settings.database_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=3600,
        connect_args=connect_args,
    )
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
    logger.info(
        "Database engine created (pool_size=%s, max_overflow=%s)",
        pool_size,
        max_overflow,
    )


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating the engine if needed."""
    _ensure_engine()
    if AsyncSessionLocal is None:
        raise RuntimeError("Database session factory could not be created")
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the engine and forget the session factory. Call on app shutdown."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None
