"""Shared helpers for audit logging: derive request metadata from Starlette Request."""

from __future__ import annotations

from starlette.requests import Request


def get_audit_request_context(request: Request) -> tuple[str | None, str | None, str | None]:
    """Return (request_id, ip_address, user_agent) for audit log entries.

    request_id from request state, IP from X-Forwarded-For (first hop) or
    request.client.host, user_agent from header.
    """
    request_id = getattr(request.state, "request_id", None)
    client_host = request.client.host if request.client else None
    forwarded = request.headers.get("X-Forwarded-For")
    ip_address = (
        (forwarded.split(",")[0].strip() if forwarded else None) or client_host
    )
    user_agent = request.headers.get("User-Agent")
    return (request_id, ip_address, user_agent)
