"""Cache key builders. Single place for key format (DRY).

Tenant lookups share one namespace (tenant:<lookup-value>) whether the
lookup value is an identifier, a subdomain or a domain, matching the
resolver's lookup order.
"""

from tenancy.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_POLICIES,
    CACHE_PREFIX_TENANT,
)


def tenant_key(lookup_value: str) -> str:
    """Cache key for a tenant lookup (id, subdomain or domain)."""
    return f"{CACHE_PREFIX_TENANT}{CACHE_KEY_SEP}{lookup_value}"


def policies_key(role: str) -> str:
    """Cache key for the effective policy list of one role."""
    return f"{CACHE_PREFIX_POLICIES}{CACHE_KEY_SEP}{role}"


def policies_prefix() -> str:
    """Prefix shared by every policy cache key."""
    return f"{CACHE_PREFIX_POLICIES}{CACHE_KEY_SEP}"
