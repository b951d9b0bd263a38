"""In-process TTL cache service.

Provides get-or-fetch caching with a per-entry TTL. Used for tenant
lookups and per-role policy lists. One instance is built in the app
lifespan and injected into TenantResolver and PermissionEngine; tests
build their own isolated instances.

State is a plain dict of immutable CacheEntry values: single-key get/set
are atomic under the event loop, and entries are replaced as a whole.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value with its absolute expiry (clock seconds)."""

    key: str
    value: T
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheService:
    """Process-wide TTL cache with explicit lifecycle (construct, clear, shutdown).

    By default concurrent misses on the same key each call their fetch
    function (no de-duplication). Set coalesce_fetches=True to share one
    in-flight fetch per key instead.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        *,
        coalesce_fetches: bool = False,
    ) -> None:
        """Initialize an empty cache.

        Args:
            clock: Monotonic time source in seconds (injectable for tests).
            coalesce_fetches: Share one in-flight fetch among concurrent misses.
        """
        self._clock = clock
        self._coalesce = coalesce_fetches
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._inflight: dict[str, asyncio.Future[Any]] = {}
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get(self, key: str) -> Any | None:
        """Return the unexpired value for key, or None. Expired entries are evicted."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        if entry.is_expired(self._clock()):
            # Only drop the entry we looked at; a concurrent writer may have replaced it.
            if self._entries.get(key) is entry:
                del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store value with TTL in seconds. Always resets the expiry.

        Args:
            key: Cache key (use tenancy.infrastructure.cache.keys builders).
            value: Value to cache; should be immutable (frozen DTO, tuple).
            ttl: Time-to-live in seconds; must be positive.
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if self._closed:
            logger.debug("Cache SET ignored after shutdown: %s", key)
            return
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)

    async def get_or_fetch(
        self, key: str, fetch: Callable[[], Awaitable[T]], ttl: float
    ) -> T:
        """Return cached value for key, or call fetch once and cache its result.

        Falsy fetch results (None, empty list, ...) are returned but not
        cached, so transient absence is re-fetched on the next access.

        Args:
            key: Cache key.
            fetch: Zero-argument coroutine function producing the value.
            ttl: Time-to-live in seconds for a stored result.

        Returns:
            The cached or freshly fetched value.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        if not self._coalesce:
            return await self._fetch_and_store(key, fetch, ttl)

        pending = self._inflight.get(key)
        if pending is not None:
            return await asyncio.shield(pending)
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await self._fetch_and_store(key, fetch, ttl)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so an unawaited future does not log at GC.
            future.exception()
            raise
        else:
            future.set_result(value)
            return value
        finally:
            self._inflight.pop(key, None)

    async def _fetch_and_store(
        self, key: str, fetch: Callable[[], Awaitable[T]], ttl: float
    ) -> T:
        value = await fetch()
        if value:
            self.set(key, value, ttl)
        else:
            logger.debug("Cache SKIP (empty result): %s", key)
        return value

    def invalidate(self, key: str) -> bool:
        """Remove key from cache. Returns True if it was present."""
        removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("Cache DELETE: %s", key)
        return removed

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix. Returns number removed."""
        keys = [k for k in self._entries if k.startswith(prefix)]
        for key in keys:
            self._entries.pop(key, None)
        if keys:
            logger.info("Cache INVALIDATE: %s* (%s keys)", prefix, len(keys))
        return len(keys)

    def clear(self) -> None:
        """Clear entire cache."""
        count = len(self._entries)
        self._entries.clear()
        logger.warning("Cache CLEARED: %s keys deleted", count)

    def stats(self) -> dict[str, Any]:
        """Return entry count and keys (including not-yet-evicted expired entries)."""
        keys = list(self._entries.keys())
        return {"size": len(keys), "keys": keys}

    async def shutdown(self) -> None:
        """Drop all entries and stop accepting writes. Call on app shutdown."""
        for future in list(self._inflight.values()):
            if not future.done():
                future.cancel()
        self._inflight.clear()
        self._entries.clear()
        self._closed = True
        logger.info("Cache shut down")
