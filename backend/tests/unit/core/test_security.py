"""
Unit Tests for Security Module
Tests for: password hashing, JWT tokens
"""
import pytest
from datetime import timedelta
from types import SimpleNamespace
from jose import jwt
from fastapi import HTTPException

from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    create_token_pair,
    decode_token,
)
from app.core.config import settings
from app.models.user import UserRole


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_password_returns_different_value(self):
        password = "testpassword123"
        hashed = get_password_hash(password)

        assert hashed != password
        assert hashed.startswith("$2")

    def test_hash_password_different_each_time(self):
        """Bcrypt generates different salts"""
        assert get_password_hash("testpassword123") != get_password_hash("testpassword123")

    def test_verify_password_correct(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = get_password_hash("testpassword123")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_empty_hash(self):
        assert verify_password("anything", "") is False

    def test_verify_password_malformed_hash(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_long_password_truncated_to_72_bytes(self):
        """Bcrypt only looks at the first 72 bytes"""
        base = "a" * 72
        hashed = get_password_hash(base + "suffix-one")
        assert verify_password(base + "suffix-two", hashed) is True


class TestJWTTokens:
    """Test JWT token creation and decoding"""

    def test_access_token_round_trip(self):
        token = create_access_token({"sub": "user-1", "role": "user"})
        payload = decode_token(token)

        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_refresh_token_type(self):
        payload = decode_token(create_refresh_token({"sub": "user-1"}))
        assert payload["type"] == "refresh"

    def test_custom_expiry(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(minutes=5))
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == "user-1"

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_token_with_wrong_secret_rejected(self):
        token = jwt.encode({"sub": "user-1"}, "some-other-secret", algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_token_pair_for_user(self):
        user = SimpleNamespace(id="abc", email="jane@example.com", role=UserRole.ADMIN)
        pair = create_token_pair(user)

        assert pair["token_type"] == "bearer"
        access = decode_token(pair["access_token"])
        refresh = decode_token(pair["refresh_token"])
        assert access["role"] == "admin"
        assert access["email"] == "jane@example.com"
        assert refresh["type"] == "refresh"
