"""
Persisted Session Store.

Keeps the bearer token and the logged-in user's profile on disk between
runs, under the same three keys the browser client kept in
``localStorage``: ``authToken``, ``isLoggedIn`` and ``userData``.

A missing or unreadable file reads as "not logged in".  ``clear()``
removes every key at once; the API client calls it on any HTTP 401.
"""

from __future__ import annotations

import json
import platform
import stat
import threading
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from portal.logger import StructuredLogger
from portal.models.auth_models import StoredSession


class TokenStore:
    """JSON-file backed session store.

    Parameters
    ----------
    path:
        Location of the session file.  Parent directories are created on
        first save.
    logger:
        Injected structured logger.
    """

    def __init__(self, path: Path, logger: StructuredLogger) -> None:
        self._path: Path = Path(path)
        self._logger: StructuredLogger = logger
        self._lock: threading.RLock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    # -- Reads -----------------------------------------------------------------

    def load(self) -> StoredSession:
        """Read the stored session; an empty session when absent or corrupt."""
        with self._lock:
            if not self._path.exists():
                return StoredSession()
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
                return StoredSession.model_validate(raw)
            except (OSError, ValueError, ValidationError) as exc:
                # ValueError covers bad JSON and bytes that are not UTF-8.
                self._logger.warning(
                    "Session file %s unreadable (%s); treating as logged out.",
                    self._path,
                    type(exc).__name__,
                )
                return StoredSession()

    def get_token(self) -> Optional[str]:
        return self.load().auth_token

    def get_user(self) -> Optional[dict[str, Any]]:
        return self.load().user_data

    @property
    def is_logged_in(self) -> bool:
        """``True`` only when the flag is set and a token is present."""
        session = self.load()
        return session.is_logged_in and bool(session.auth_token)

    # -- Writes ----------------------------------------------------------------

    def save(self, token: str, user: dict[str, Any]) -> None:
        """Persist *token* and *user* and mark the session logged in."""
        session = StoredSession(auth_token=token, is_logged_in=True, user_data=user)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(session.model_dump(by_alias=True), ensure_ascii=False),
                encoding="utf-8",
            )
            if platform.system() != "Windows":
                self._path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 0o600
        self._logger.info("Session stored for user %s.", user.get("email", "?"))

    def update_user(self, user: dict[str, Any]) -> None:
        """Replace ``userData`` while keeping the current token."""
        token = self.get_token()
        if token:
            self.save(token, user)

    def clear(self) -> None:
        """Remove every stored key.  Safe to call when nothing is stored."""
        with self._lock:
            try:
                self._path.unlink(missing_ok=True)
            except OSError as exc:
                self._logger.error("Failed to clear session file %s: %s", self._path, exc)
                return
        self._logger.info("Stored session cleared.")
