"""Caller identity from a Bearer JWT. The sub claim is the user id."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tenancy.domain.exceptions import NoAuthContextException
from tenancy.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str:
    """Return the caller's user id.

    Raises:
        NoAuthContextException: If the token is missing, invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise NoAuthContextException()
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.debug("Rejected bearer token: %s", e)
        raise NoAuthContextException("Invalid or expired token") from e
    user_id = str(payload["sub"])
    request.state.user_id = user_id
    return user_id
