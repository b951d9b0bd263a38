"""Application layer: DTOs, ports, and services (tenant resolution, RBAC, audit)."""
