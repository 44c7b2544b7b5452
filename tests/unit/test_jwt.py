"""Tests for staff bearer token creation and verification."""

from datetime import timedelta

import pytest

from civic_admin.infrastructure.security.jwt import create_access_token, verify_token


def test_round_trip_claims() -> None:
    payload = verify_token(create_access_token("u1", "admin", email="a@city.gov"))
    assert payload["sub"] == "u1"
    assert payload["role"] == "admin"
    assert payload["email"] == "a@city.gov"


def test_expired_token_rejected() -> None:
    token = create_access_token("u1", "admin", expires_delta=timedelta(seconds=-5))
    with pytest.raises(ValueError, match="Invalid token"):
        verify_token(token)


def test_garbage_rejected() -> None:
    with pytest.raises(ValueError):
        verify_token("not-a-jwt")


def test_missing_role_rejected() -> None:
    token = create_access_token("u1", "")
    with pytest.raises(ValueError, match="role"):
        verify_token(token)
