"""
Authentication module.
"""

from flipdesk.auth.password import verify_password, hash_password
from flipdesk.auth.jwt import create_access_token, create_refresh_token, decode_token
from flipdesk.auth.tokens import hash_token
from flipdesk.auth.events import AuthEventEmitter, AuthUser, get_auth_events
from flipdesk.auth.dependencies import get_current_user, get_current_user_optional

__all__ = [
    "verify_password",
    "hash_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "hash_token",
    "AuthEventEmitter",
    "AuthUser",
    "get_auth_events",
    "get_current_user",
    "get_current_user_optional",
]
