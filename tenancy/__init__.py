"""Multi-tenant isolation, role-based access control and audit trail for a commerce backend."""

__version__ = "1.0.0"
