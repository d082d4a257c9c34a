"""
API Dependencies Module

This module provides FastAPI dependency functions for authentication.
It implements a dual authentication strategy supporting both bearer tokens (for API clients)
and HTTP-only cookies (for browser clients).
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from prodigy.core.config import settings
from prodigy.core.errors import Forbidden, Unauthorized
from prodigy.core.security import decode_access_token
from prodigy.db.session import get_db
from prodigy.models.user import User

# auto_error=False allows us to check cookies as a fallback
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/login",
    auto_error=False
)


def get_token(request: Request, token: Optional[str] = Depends(reusable_oauth2)) -> Optional[str]:
    # Try Authorization header first, then fall back to cookie
    if token:
        return token
    token = request.cookies.get(settings.COOKIE_NAME)
    # Cookie format is "Bearer <token>"
    if token and token.startswith("Bearer "):
        token = token[len("Bearer "):]
    return token or None


def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(get_token),
) -> User:
    """
    Dependency that resolves the authenticated identity from the session token.

    The identity is always taken from the verified token, never from ids sent
    by the client.

    Raises:
        Unauthorized: If the token is missing, invalid, expired, or its identity
            no longer exists
    """
    if not token:
        raise Unauthorized("Unauthorized")

    user_id = decode_access_token(token)
    if not user_id:
        raise Unauthorized("Invalid token")

    user = db.get(User, user_id)
    if not user:
        raise Unauthorized("Invalid token")
    return user


def require_self(user_id: str, current_user: User) -> None:
    """Reject path-supplied user ids that differ from the session's identity."""
    if user_id != current_user.id:
        raise Forbidden("Access denied. You can only access your own data.")
