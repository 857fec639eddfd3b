"""
FastAPI dependencies that resolve the signed-in user.

A request is authenticated by an access token, sent either as
"Authorization: Bearer <token>" (API clients) or in the httpOnly
access_token cookie set at login (browsers).
"""

from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from flipdesk.db.database import get_db
from flipdesk.db.models import User
from flipdesk.auth.jwt import decode_token

ACCESS_COOKIE = "access_token"


def get_token_from_request(request: Request) -> Optional[str]:
    """Access token from the Authorization header, else from the cookie."""
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()

    return request.cookies.get(ACCESS_COOKIE)


def load_active_user(db: Session, user_id: Optional[str]) -> Optional[User]:
    """An active, non-deleted user by ID."""
    if not user_id:
        return None
    return db.query(User).filter(
        User.id == user_id,
        User.is_deleted == False,
        User.is_active == True,
    ).first()


async def get_current_user_optional(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    The signed-in user, or None.

    Anonymous callers, expired or malformed tokens and refresh tokens
    presented as access tokens all resolve to None.
    """
    token = get_token_from_request(request)
    payload = decode_token(token) if token else None
    if not payload or payload.get("type") != "access":
        return None

    return load_active_user(db, payload.get("sub"))


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """The signed-in user; 401 when the request is anonymous."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
