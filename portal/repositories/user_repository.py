"""
User Repository.

Account administration over ``/api/users``.  Users are never deleted
from the client; access is revoked with :meth:`deactivate`.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.models.user import User
from portal.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository):
    """Data access layer for User entities."""

    RESOURCE = "users"

    def list_all(self) -> list[User]:
        return self._many(self._api.get(self._path()), User, "users")

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._one(self._api.get(self._path(user_id)), User, "user")

    def update(self, user_id: str, changes: dict[str, Any]) -> Optional[User]:
        envelope = self._api.put(self._path(user_id), json=self._outbound(changes))
        return self._one(envelope, User, "user")

    def activate(self, user_id: str) -> Optional[User]:
        return self._one(self._api.patch(self._path(user_id, "activate")), User, "user")

    def deactivate(self, user_id: str) -> Optional[User]:
        return self._one(self._api.patch(self._path(user_id, "deactivate")), User, "user")

    def toggle_status(self, user_id: str) -> Optional[User]:
        return self._one(self._api.patch(self._path(user_id, "toggle-status")), User, "user")

    def proponents_for_province(self, province: str) -> list[User]:
        """Proponents a PSTO office is responsible for."""
        envelope = self._api.get(self._path("psto", province, "proponents"))
        return self._many(envelope, User)
