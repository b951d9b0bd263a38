"""Infrastructure: cache, persistence, and security adapters."""
