"""
Authentication API endpoints.

Browsers authenticate with the httpOnly cookies set here; API clients can
send the returned access token as a bearer header instead. Every sign-in
and sign-out is published on the auth event emitter.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Response, Request
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from flipdesk.db.database import get_db
from flipdesk.db.models import User, RefreshToken
from flipdesk.auth.password import verify_password, hash_password
from flipdesk.auth.jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_token_expiry,
)
from flipdesk.auth.tokens import hash_token
from flipdesk.auth.dependencies import (
    ACCESS_COOKIE,
    get_current_user,
    get_current_user_optional,
    get_token_from_request,
    load_active_user,
)
from flipdesk.auth.events import AuthUser, get_auth_events
from flipdesk.services.email import get_email_service
from flipdesk.config import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()

REFRESH_COOKIE = "refresh_token"


# === Pydantic Schemas ===

class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: Optional[str] = None
    phone_number: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None  # falls back to the cookie


class SessionResponse(BaseModel):
    session: Optional[dict] = None


# === Helper Functions ===

def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        phone_number=user.phone_number,
    )


def to_auth_user(user: User) -> AuthUser:
    return AuthUser(**user_to_response(user).model_dump())


def unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def start_session(user: User, response: Response, db: Session) -> LoginResponse:
    """
    Issue a token pair, remember the refresh token and set both cookies.

    Only the SHA-256 hash of the refresh token is stored.
    """
    claims = {"sub": user.id, "email": user.email}
    access_token = create_access_token(claims)
    refresh_token = create_refresh_token(claims)
    refresh_ttl = timedelta(days=settings.jwt_refresh_token_expire_days)

    db.add(RefreshToken(
        user_id=user.id,
        token_hash=hash_token(refresh_token),
        expires_at=datetime.utcnow() + refresh_ttl,
    ))
    db.commit()

    secure = settings.app_env == "production"
    for key, value, max_age in (
        (ACCESS_COOKIE, access_token, settings.jwt_access_token_expire_minutes * 60),
        (REFRESH_COOKIE, refresh_token, int(refresh_ttl.total_seconds())),
    ):
        response.set_cookie(
            key=key,
            value=value,
            httponly=True,
            secure=secure,
            samesite="lax",
            max_age=max_age,
        )

    get_auth_events().notify(to_auth_user(user))
    return LoginResponse(access_token=access_token, user=user_to_response(user))


# === Endpoints ===

@router.post("/signup", response_model=LoginResponse, status_code=201)
async def signup(
    request: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create an account and sign the new user in."""
    email = request.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
        )

    user = User(
        email=email,
        hashed_password=hash_password(request.password),
        full_name=request.full_name,
        phone_number=request.phone_number,
        last_login_at=datetime.utcnow(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"New user signed up: {user.id}")

    get_email_service().send_welcome_email(user.email, user.full_name)
    return start_session(user, response, db)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """Sign in with email and password."""
    user = db.query(User).filter(
        User.email == request.email.lower(),
        User.is_deleted == False,
    ).first()

    if not user or not verify_password(request.password, user.hashed_password):
        raise unauthorized("Invalid email or password")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    user.last_login_at = datetime.utcnow()
    logger.info(f"User logged in: {user.id}")
    return start_session(user, response, db)


@router.post("/refresh", response_model=LoginResponse)
async def refresh_tokens(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    db: Session = Depends(get_db),
):
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token is revoked, so each one works only once.
    """
    token = (body.refresh_token if body else None) or request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise unauthorized("Refresh token required")

    payload = decode_token(token)
    if not payload or payload.get("type") != "refresh":
        raise unauthorized("Invalid refresh token")

    stored = db.query(RefreshToken).filter(
        RefreshToken.token_hash == hash_token(token),
        RefreshToken.user_id == payload.get("sub"),
        RefreshToken.revoked_at == None,
        RefreshToken.is_deleted == False,
    ).first()
    if not stored or stored.expires_at < datetime.utcnow():
        raise unauthorized("Refresh token is expired or revoked")

    user = load_active_user(db, stored.user_id)
    if not user:
        raise unauthorized("User not found")

    stored.revoked_at = datetime.utcnow()
    return start_session(user, response, db)


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Revoke the session's refresh token and clear the auth cookies."""
    token = request.cookies.get(REFRESH_COOKIE)
    if token:
        db.query(RefreshToken).filter(
            RefreshToken.user_id == current_user.id,
            RefreshToken.token_hash == hash_token(token),
        ).update({"revoked_at": datetime.utcnow()})
        db.commit()

    response.delete_cookie(key=ACCESS_COOKIE)
    response.delete_cookie(key=REFRESH_COOKIE)
    get_auth_events().notify(None)

    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return user_to_response(current_user)


@router.get("/session", response_model=SessionResponse)
async def get_session(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """The signed-in user and access-token expiry, or a null session."""
    if current_user is None:
        return SessionResponse(session=None)

    expires_at = get_token_expiry(get_token_from_request(request))
    return SessionResponse(session={
        "user": user_to_response(current_user).model_dump(),
        "expires_at": expires_at.isoformat() if expires_at else None,
    })
