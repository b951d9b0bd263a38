"""Cache: in-process TTL cache service and cache key utilities.

Used by the tenant resolver and the permission engine. Key format is in
keys.py (DRY).
"""

from tenancy.infrastructure.cache.keys import policies_key, policies_prefix, tenant_key
from tenancy.infrastructure.cache.memory_cache import CacheEntry, CacheService

__all__ = [
    "CacheEntry",
    "CacheService",
    "policies_key",
    "policies_prefix",
    "tenant_key",
]
