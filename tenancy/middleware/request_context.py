"""Request context middleware.

Generates or forwards the request id header, echoes it on the response,
and writes one access log line per request with status and duration.
Client-provided ids are sanitized (length + character set) so they are
safe to log. Raw ASGI, no BaseHTTPMiddleware.
"""

import logging
import re
import time
import uuid
from typing import Callable

logger = logging.getLogger("tenancy.access")

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def _get_header(scope: dict, name: str) -> str | None:
    """First header value for name (case-insensitive). ASGI headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw if safe for logs, otherwise a fresh UUID4."""
    value = (raw or "").strip()
    if not REQUEST_ID_ALLOWED_PATTERN.match(value):
        return str(uuid.uuid4())
    return value


def RequestContextMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Attach request_id to scope state and the response; log method, path, status, duration."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        started = time.perf_counter()
        status_holder = {"status": 500}

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
                headers = list(message.get("headers", []))
                headers.append((header_name.encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "%s %s -> %s (%.1fms) request_id=%s",
                scope.get("method"),
                scope.get("path"),
                status_holder["status"],
                (time.perf_counter() - started) * 1000,
                request_id,
            )

    return asgi_app
