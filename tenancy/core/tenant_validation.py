"""Tenant identifier and host format validation.

Used by the tenant resolver so malformed header or host values never reach
the datastore or the cache key space.
"""

import re

# CUID/slug-style: alphanumeric, hyphen, underscore; bounded length.
TENANT_ID_MAX_LENGTH = 64
_TENANT_ID_RE = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(TENANT_ID_MAX_LENGTH) + r"}$"
)

# RFC 1123 host names; labels joined by dots, no port.
HOST_MAX_LENGTH = 253
_HOST_RE = re.compile(
    r"^(?=.{1," + str(HOST_MAX_LENGTH) + r"}$)[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def is_valid_tenant_id_format(value: str) -> bool:
    """Return True if value is safe for use as a tenant identifier."""
    if not value or len(value) > TENANT_ID_MAX_LENGTH:
        return False
    return bool(_TENANT_ID_RE.fullmatch(value))


def is_valid_host_format(value: str) -> bool:
    """Return True if value looks like a host name (port already stripped)."""
    if not value or len(value) > HOST_MAX_LENGTH:
        return False
    return bool(_HOST_RE.fullmatch(value))
