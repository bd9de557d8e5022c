"""
Tests for password hashing and access tokens.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from server.security import PasswordHasher, TokenService

SECRET = "unit-test-secret"


@pytest.fixture(scope="module")
def hasher():
    return PasswordHasher(rounds=4)


def test_hash_is_salted(hasher):
    """Test hash is salted."""
    first = hasher.hash("secret1")
    second = hasher.hash("secret1")

    assert first != second
    assert "secret1" not in first
    assert hasher.verify("secret1", first)
    assert hasher.verify("secret1", second)


def test_verify_rejects_wrong_password(hasher):
    """Test verify rejects wrong password."""
    stored = hasher.hash("secret1")
    assert not hasher.verify("secret2", stored)


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$2b$04$short", "plaintext"])
def test_verify_malformed_hash_returns_false(hasher, bad_hash):
    """Test verify returns False for malformed hashes."""
    assert hasher.verify("secret1", bad_hash) is False


def test_verify_empty_password_returns_false(hasher):
    """Test verify returns False for an empty password."""
    assert hasher.verify("", hasher.hash("secret1")) is False


def test_issue_then_verify():
    """Test a fresh token verifies to its account."""
    tokens = TokenService(SECRET)
    token = tokens.issue("user-1")
    assert tokens.verify(token) == "user-1"


def test_token_claims():
    """Test token sub, iat and exp claims."""
    tokens = TokenService(SECRET, expires_minutes=30)
    claims = jwt.decode(tokens.issue("user-1"), SECRET, algorithms=["HS256"])

    assert claims["sub"] == "user-1"
    assert claims["exp"] - claims["iat"] == 30 * 60


def test_expired_token_is_invalid():
    """Test expired token is invalid."""
    issued_long_ago = datetime.now(timezone.utc) - timedelta(hours=2)
    tokens = TokenService(SECRET, expires_minutes=60, clock=lambda: issued_long_ago)

    token = tokens.issue("user-1")

    assert TokenService(SECRET).verify(token) is None


def test_token_from_other_secret_is_invalid():
    """Test token from other secret is invalid."""
    token = TokenService("another-secret").issue("user-1")
    assert TokenService(SECRET).verify(token) is None


def test_tampered_token_is_invalid():
    """Test tampered token is invalid."""
    tokens = TokenService(SECRET)
    header, payload, signature = tokens.issue("user-1").split(".")
    forged_payload = jwt.encode({"sub": "user-2"}, "x").split(".")[1]

    assert tokens.verify(f"{header}.{forged_payload}.{signature}") is None


def test_token_without_subject_is_invalid():
    """Test token without subject is invalid."""
    exp = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
    token = jwt.encode({"exp": exp}, SECRET, algorithm="HS256")
    assert TokenService(SECRET).verify(token) is None


def test_token_without_expiry_is_invalid():
    """Test token without expiry is invalid."""
    token = jwt.encode({"sub": "user-1"}, SECRET, algorithm="HS256")
    assert TokenService(SECRET).verify(token) is None


@pytest.mark.parametrize("garbage", [None, "", "abc", "a.b.c", "Bearer xyz"])
def test_malformed_token_is_invalid(garbage):
    """Test malformed token is invalid."""
    assert TokenService(SECRET).verify(garbage) is None


def test_empty_secret_is_rejected():
    """Test empty secret is rejected."""
    with pytest.raises(ValueError):
        TokenService("")
