"""
Client session state.

Holds the signed-in user and the token pair, and lets UI code subscribe
to changes.
"""

import logging
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

import jwt

logger = logging.getLogger(__name__)

# Tokens this close to `exp` are treated as already expired
EXPIRY_LEEWAY_SECONDS = 5


def is_token_expired(
    token: Optional[str],
    leeway_seconds: int = EXPIRY_LEEWAY_SECONDS,
    now: Optional[float] = None,
) -> bool:
    """
    Check a JWT's `exp` claim without verifying its signature.

    Missing, undecodable or exp-less tokens count as expired.
    """
    if not token:
        return True

    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return True

    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return True

    current = time.time() if now is None else now
    return current >= exp - leeway_seconds


@dataclass(frozen=True)
class Session:
    """Snapshot of the client's authentication state."""

    user: Optional[dict] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None and self.user is not None


SessionListener = Callable[[Session], None]


class SessionStore:
    """
    Mutable holder of the current Session.

    Every update replaces the snapshot and notifies subscribers.
    """

    def __init__(self, session: Optional[Session] = None):
        self._session = session or Session()
        self._listeners: List[SessionListener] = []

    @property
    def session(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with each new Session.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_tokens(
        self,
        access_token: str,
        refresh_token: str,
        user: Optional[dict] = None,
    ) -> None:
        self._update(
            access_token=access_token,
            refresh_token=refresh_token,
            user=user if user is not None else self._session.user,
            error=None,
        )

    def set_user(self, user: dict) -> None:
        self._update(user=user)

    def set_loading(self, is_loading: bool) -> None:
        self._update(is_loading=is_loading)

    def set_error(self, error: Optional[str]) -> None:
        self._update(error=error)

    def clear(self, error: Optional[str] = None) -> None:
        """Forget user and tokens, keeping an optional error for display."""
        logger.debug("Session cleared")
        self._session = Session(error=error)
        self._notify()

    def _update(self, **changes) -> None:
        self._session = replace(self._session, **changes)
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)
