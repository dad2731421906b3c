"""Unit tests for JWT token creation, decoding, and validation."""

from datetime import timedelta

import pytest
from jose import JWTError

from rentora.auth.jwt import (
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
)
from rentora.config import settings


class TestCreateAccessToken:
    """Test access token creation."""

    def test_contains_type_access(self):
        payload = decode_token(create_access_token({"sub": "user-123"}))
        assert payload["type"] == "access"

    def test_contains_standard_claims(self):
        payload = decode_token(create_access_token({"sub": "user-abc"}))
        assert payload["sub"] == "user-abc"
        assert "iat" in payload
        assert "exp" in payload


class TestCreateRefreshToken:
    def test_contains_type_refresh(self):
        payload = decode_token(create_refresh_token({"sub": "user-123"}))
        assert payload["type"] == "refresh"


class TestDecodeToken:
    def test_expired_token_raises(self):
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(JWTError):
            decode_token(token)

    def test_invalid_token_raises(self):
        with pytest.raises(JWTError):
            decode_token("not.a.valid.token")


class TestCreateTokenPair:
    def test_pair_shape(self):
        pair = create_token_pair("user-1", email="a@test.com", role="HOST")
        assert pair["token_type"] == "bearer"
        assert pair["expires_in"] == settings.jwt_access_token_expire_minutes * 60

    def test_access_token_carries_informational_claims(self):
        pair = create_token_pair("user-1", email="a@test.com", role="HOST")
        access = decode_token(pair["access_token"])
        assert access["email"] == "a@test.com"
        assert access["role"] == "HOST"

    def test_refresh_token_carries_only_subject(self):
        pair = create_token_pair("user-1", email="a@test.com", role="HOST")
        refresh = decode_token(pair["refresh_token"])
        assert refresh["sub"] == "user-1"
        assert "email" not in refresh
