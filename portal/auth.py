"""
Authentication & Session State.

Provides an injectable ``SessionManager`` that holds the signed-in
``User`` for the lifetime of the desktop session.  The bearer token
itself lives in the ``TokenStore``; this object only mirrors the
in-memory view the UI reads (who is logged in, which role, which
province).

Usage::

    from portal.auth import SessionManager
    from portal.models.user import User

    session = SessionManager()
    session.set_current_user(User(id="66f0...", email="psto@dost.gov.ph", role="psto"))
    user = session.get_current_user()
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from portal.models.enums import UserRole
from portal.models.user import User

SessionListener = Callable[[Optional[User]], None]


class SessionManager:
    """Injectable holder for the current authenticated user.

    Pass a single ``SessionManager`` through the composition root so
    every service and view shares the same session.  Listeners are
    notified on login and on logout (with ``None``), which is how the
    shell learns about a forced logout after a 401.
    """

    def __init__(self) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._current_user: Optional[User] = None
        self._listeners: list[SessionListener] = []

    def set_current_user(self, user: User) -> None:
        """Record *user* as the authenticated session user."""
        with self._lock:
            self._current_user = user
            listeners = list(self._listeners)
        for listener in listeners:
            listener(user)

    def get_current_user(self) -> User:
        """Return the authenticated user.

        Raises:
            RuntimeError: If no user is currently authenticated.
        """
        with self._lock:
            if self._current_user is None:
                raise RuntimeError(
                    "No user is currently authenticated. Login required."
                )
            return self._current_user

    @property
    def current_user(self) -> Optional[User]:
        with self._lock:
            return self._current_user

    @property
    def role(self) -> Optional[str]:
        with self._lock:
            return self._current_user.role if self._current_user else None

    def has_role(self, *roles: str) -> bool:
        """``True`` when the current user holds one of *roles*.

        ``super_admin`` passes every role check.
        """
        role = self.role
        if role is None:
            return False
        return role == UserRole.SUPER_ADMIN or role in roles

    def add_listener(self, listener: SessionListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: SessionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def clear(self) -> None:
        """Remove the current user, ending the session."""
        with self._lock:
            had_user = self._current_user is not None
            self._current_user = None
            listeners = list(self._listeners)
        if had_user:
            for listener in listeners:
                listener(None)

    @property
    def is_authenticated(self) -> bool:
        """``True`` when a user is currently logged in."""
        with self._lock:
            return self._current_user is not None
