"""
Bearer token authorization for protected endpoints.

Every endpoint that touches a user's records depends on
``get_current_user_id``; the account id it returns is the only one those
endpoints use.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from server.db import User, UserStore, get_db
from server.security import TokenService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> str:
    """Resolve the request's bearer token to an account id, or reject with 401."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise _unauthorized("Authorization token required")

    token_service: TokenService = request.app.state.token_service
    user_id = token_service.verify(token)
    if user_id is None:
        raise _unauthorized("Invalid token")

    return user_id


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """Load the authorized account. Tokens for unknown accounts are rejected."""
    user = UserStore(db).get(user_id)
    if user is None:
        logger.warning("[Auth] Token subject has no account")
        raise _unauthorized("Invalid token")
    return user
