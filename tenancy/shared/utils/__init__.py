"""Small, dependency-light utilities."""

from tenancy.shared.utils.datetime import ensure_utc, utc_now
from tenancy.shared.utils.generators import generate_cuid
from tenancy.shared.utils.sanitization import is_sensitive_field, redact_sensitive

__all__ = [
    "ensure_utc",
    "generate_cuid",
    "is_sensitive_field",
    "redact_sensitive",
    "utc_now",
]
