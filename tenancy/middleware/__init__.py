"""ASGI middleware."""

from tenancy.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
