"""
Password hashing and access tokens.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Salted, adaptive one-way hashing of account passwords (bcrypt)."""

    def __init__(self, rounds: int = 12):
        self.context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self.context.hash(plaintext)

    def verify(self, plaintext: str, hash_string: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        if not plaintext or not hash_string:
            return False
        try:
            return self.context.verify(plaintext, hash_string)
        except (ValueError, TypeError):
            return False


class TokenService:
    """
    Issues and verifies signed, time-bounded access tokens (JWT).

    The token carries the account id in ``sub``. Changing the secret key
    invalidates every token issued under the old one.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60 * 24 * 7,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if expires_minutes <= 0:
            raise ValueError(f"expires_minutes must be > 0, got {expires_minutes}")

        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expires_minutes)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, account_id: str) -> str:
        issued_at = self.clock()
        claims = {
            "sub": account_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.expires_delta).timestamp()),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Optional[str]:
        """
        Resolve a token to its account id.

        Returns:
            The account id, or None when the token is malformed, wrongly
            signed, expired or has no subject
        """
        if not token:
            return None

        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            logger.debug(f"[Auth] Token rejected: {type(e).__name__}")
            return None

        account_id = claims.get("sub")
        if not isinstance(account_id, str) or not account_id:
            return None
        return account_id
