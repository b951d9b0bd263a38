"""Service interfaces (ports) for the application layer.

Protocols define contracts for infrastructure services (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class ICacheService(Protocol):
    """Protocol for the process-wide TTL cache used by resolver and engine."""

    async def get_or_fetch(
        self, key: str, fetch: Callable[[], Awaitable[T]], ttl: float
    ) -> T:
        """Return unexpired cached value or call fetch once and cache a truthy result."""

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Store value under key, resetting its expiry."""

    def invalidate(self, key: str) -> bool:
        """Remove key; True if it was present."""

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix; return count removed."""

    def clear(self) -> None:
        """Remove every entry."""

    def stats(self) -> dict[str, Any]:
        """Return {'size': int, 'keys': list[str]}."""
