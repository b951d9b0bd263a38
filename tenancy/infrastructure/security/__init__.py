"""Security: JWT caller identity."""
