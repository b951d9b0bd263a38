"""Redaction of sensitive values before they reach the audit trail."""

from typing import Any

from tenancy.core.constants import REDACTION_MAX_DEPTH, SENSITIVE_FIELDS

DEFAULT_MARKER = "[REDACTED]"

_SEPARATORS = str.maketrans("", "", "_- ")


def _normalize(name: str) -> str:
    return name.strip().lower().translate(_SEPARATORS)


_SENSITIVE_NORMALIZED = frozenset(_normalize(name) for name in SENSITIVE_FIELDS)


def is_sensitive_field(name: Any) -> bool:
    """True if name is a sensitive field, ignoring case and '_' or '-' separators."""
    if not isinstance(name, str):
        return False
    return _normalize(name) in _SENSITIVE_NORMALIZED


def _redact_value(value: Any, marker: str, depth: int) -> Any:
    if depth <= 0:
        # Too deep to inspect; hide rather than risk leaking a nested secret.
        return marker
    if isinstance(value, dict):
        return _redact_dict(value, marker, depth - 1)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, marker, depth - 1) for item in value]
    return value


def _redact_dict(data: dict[Any, Any], marker: str, depth: int) -> dict[Any, Any]:
    redacted: dict[Any, Any] = {}
    for key, value in data.items():
        if is_sensitive_field(key):
            redacted[key] = marker
        else:
            redacted[key] = _redact_value(value, marker, depth)
    return redacted


def redact_sensitive(
    data: dict[str, Any] | None,
    *,
    recursive: bool = True,
    marker: str = DEFAULT_MARKER,
    max_depth: int = REDACTION_MAX_DEPTH,
) -> dict[str, Any] | None:
    """Return a copy of data with sensitive values replaced by marker.

    With recursive=False only top-level keys are checked; nested dicts and
    lists are copied through untouched. The input is never mutated.

    Args:
        data: Audit metadata (may be None).
        recursive: Walk nested dicts and lists of dicts.
        marker: Replacement value for sensitive fields.
        max_depth: Nesting limit for the recursive walk.

    Returns:
        New dict, or None when data is None.
    """
    if data is None:
        return None
    if not recursive:
        return {
            key: (marker if is_sensitive_field(key) else value)
            for key, value in data.items()
        }
    return _redact_dict(data, marker, max_depth)
