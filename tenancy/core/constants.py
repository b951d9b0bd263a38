"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure and RBAC sentinels (DRY).
"""

# Cache key prefixes (tenant:<lookup-value>, policies:<role>)
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_POLICIES = "policies"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Matches any resource or any action in a policy row.
WILDCARD = "*"

# Field names whose values are never written to the audit trail.
# Compared case-insensitively with "_" and "-" removed, so camelCase,
# kebab-case and snake_case spellings all match.
SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "password_hash",
        "hashed_password",
        "new_password",
        "old_password",
        "current_password",
        "password_confirmation",
        "secret",
        "client_secret",
        "token",
        "access_token",
        "refresh_token",
        "api_key",
        "credit_card",
        "card_number",
        "cvv",
        "cvc",
        "ssn",
        "national_id",
    }
)

# Upper bound on nesting walked by recursive redaction.
REDACTION_MAX_DEPTH = 32
