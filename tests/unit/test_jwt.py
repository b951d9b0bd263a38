"""Tests for caller identity tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from tenancy.core.config import get_settings
from tenancy.infrastructure.security.jwt import create_access_token, verify_token


def test_round_trip_keeps_subject() -> None:
    token = create_access_token({"sub": "user-1", "email": "u@example.com"})
    payload = verify_token(token)
    assert payload["sub"] == "user-1"
    assert "exp" in payload


def test_expired_token_is_rejected() -> None:
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(token)


def test_token_without_subject_is_rejected() -> None:
    with pytest.raises(ValueError):
        verify_token(create_access_token({"email": "u@example.com"}))


def test_token_signed_with_other_key_is_rejected() -> None:
    settings = get_settings()
    forged = jwt.encode({"sub": "root", "exp": 9999999999}, "another-key", algorithm=settings.algorithm)
    with pytest.raises(ValueError):
        verify_token(forged)


def test_garbage_is_rejected() -> None:
    with pytest.raises(ValueError):
        verify_token("not-a-jwt")
