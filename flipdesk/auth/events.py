"""
Auth state change notifications.

AuthEventEmitter replaces a module-level "current user + listener list"
with an explicit object. Subscribers receive the signed-in user as an
AuthUser, or None on sign-out.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """Public view of a signed-in user."""

    id: str
    email: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None


AuthListener = Callable[[Optional[AuthUser]], None]


class AuthEventEmitter:
    """
    Observable holding the last known auth state.

    Lifecycle: subscribe() registers a listener and returns a function that
    removes it. Calling the returned function more than once is a no-op.
    Listeners are called synchronously, in subscription order, by notify().
    A listener that raises is logged and skipped; the rest still run.
    """

    def __init__(self):
        self._listeners: List[AuthListener] = []
        self._current_user: Optional[AuthUser] = None
        self._lock = threading.Lock()

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._current_user

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, callback: AuthListener) -> Callable[[], None]:
        """Register a listener. Returns its unsubscribe function."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def notify(self, user: Optional[AuthUser]) -> None:
        """Record the new auth state and tell every listener."""
        with self._lock:
            self._current_user = user
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(user)
            except Exception:
                logger.exception("Auth listener %r failed", listener)


_auth_events = AuthEventEmitter()


def get_auth_events() -> AuthEventEmitter:
    """Get the application's auth event emitter."""
    return _auth_events
