"""ORM models. Importing this package registers every table on Base.metadata."""

from tenancy.infrastructure.persistence.models.admin_user import AdminUser
from tenancy.infrastructure.persistence.models.audit_log import AuditLog
from tenancy.infrastructure.persistence.models.rbac_policy import RbacPolicy
from tenancy.infrastructure.persistence.models.tenant import Tenant

__all__ = ["AdminUser", "AuditLog", "RbacPolicy", "Tenant"]
