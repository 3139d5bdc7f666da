"""
Auth Repository.

Unauthenticated endpoints: login, registration and the password-reset
flow.  Login is the only call that yields a bearer token.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.api_client import ApiError
from portal.repositories.base_repository import BaseRepository


class AuthRepository(BaseRepository):
    """Data access for ``/api/auth`` (and account creation under ``/api/users``)."""

    RESOURCE = "auth"

    def login(self, email: str, password: str) -> tuple[str, dict[str, Any]]:
        """Exchange credentials for ``(token, raw user dict)``.

        The user dict is returned camelCase, exactly as the backend sent
        it, because it is persisted verbatim as ``userData``.

        Raises:
            ApiError: credentials rejected or the response lacks a token.
        """
        envelope = self._api.post(
            self._path("login"),
            json={"email": email, "password": password},
            auth=False,
        )
        token: Optional[str] = envelope.payload("token")
        user: Optional[dict[str, Any]] = envelope.payload("user")
        if not token or not isinstance(user, dict):
            raise ApiError("Login response did not include a session token")
        return token, user

    def register(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a proponent account (``POST /users/create``)."""
        envelope = self._api.post("/users/create", json=self._outbound(payload), auth=False)
        return self._raw(envelope, "user") or {}

    def forgot_password(self, email: str) -> Optional[str]:
        envelope = self._api.post(
            self._path("forgot-password"), json={"email": email}, auth=False,
        )
        return envelope.message

    def verify_reset_token(self, token: str) -> bool:
        envelope = self._api.get(self._path("verify-reset-token", token), auth=False)
        return envelope.success

    def reset_password(self, token: str, password: str) -> Optional[str]:
        envelope = self._api.post(
            self._path("reset-password"),
            json={"token": token, "password": password},
            auth=False,
        )
        return envelope.message
