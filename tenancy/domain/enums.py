"""Domain enumerations for the tenancy core.

Enums represent fixed sets of domain values (tenant status, roles,
RBAC resources and actions, audit vocabulary). All are str Enums, so
members compare equal to the plain strings stored in the datastore.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status. Tenants are deactivated, never deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class Role(_ValuesMixin, str, Enum):
    """Named permission bundles.

    GLOBAL_ADMIN carries an implicit cross-tenant grant; the others are
    scoped to the tenant of the assignment and granted by policy rows.
    """

    GLOBAL_ADMIN = "GlobalAdmin"
    TENANT_ADMIN = "TenantAdmin"
    CATALOG_MGR = "CatalogMgr"
    ORDER_OPS = "OrderOps"
    READ_ONLY = "ReadOnly"


class Resource(_ValuesMixin, str, Enum):
    """Resources named by policies. ANY is the wildcard."""

    PRODUCT = "product"
    ORDER = "order"
    CUSTOMER = "customer"
    TENANT = "tenant"
    USER = "user"
    POLICY = "policy"
    AUDIT = "audit"
    ANY = "*"


class Action(_ValuesMixin, str, Enum):
    """Actions named by policies. ANY is the wildcard."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    CANCEL = "cancel"
    FULFILL = "fulfill"
    REFUND = "refund"
    ANY = "*"


class DetectionMethod(_ValuesMixin, str, Enum):
    """Which tenant signal produced the resolved tenant (advisory only)."""

    HEADER = "header"
    SUBDOMAIN = "subdomain"
    DOMAIN = "domain"
    DEFAULT = "default"


class AuditAction(_ValuesMixin, str, Enum):
    """Kinds of operations written to the audit trail."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    READ = "read"
    LOGIN = "login"
    LOGOUT = "logout"
    EXPORT = "export"


class AuditResource(_ValuesMixin, str, Enum):
    """Kinds of resources written to the audit trail."""

    TENANT = "tenant"
    PRODUCT = "product"
    ORDER = "order"
    CUSTOMER = "customer"
    USER = "user"
    CART = "cart"
    PAYMENT = "payment"
    POLICY = "policy"
