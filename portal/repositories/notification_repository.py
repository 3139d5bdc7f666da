"""
Notification Repository.

Notifications are addressed per recipient role: the list and the
mark-all-read endpoints are keyed by ``proponent``, ``psto`` or
``dost`` plus the user's id.
"""

from __future__ import annotations

from typing import Any

from portal.models.enums import UserRole
from portal.models.notification import Notification
from portal.repositories.base_repository import BaseRepository

# Path segment for each role's notification feed.
ROLE_SEGMENTS: dict[str, str] = {
    UserRole.PROPONENT: "proponent",
    UserRole.PSTO: "psto",
    UserRole.DOST_MIMAROPA: "dost",
    UserRole.SUPER_ADMIN: "dost",
}


def feed_segment(role: str) -> str:
    """Notification feed for *role*; unknown roles read the proponent feed."""
    return ROLE_SEGMENTS.get(role, "proponent")


class NotificationRepository(BaseRepository):
    """Data access layer for notifications."""

    RESOURCE = "notifications"

    def list_for(
        self,
        role: str,
        user_id: str,
        *,
        limit: int = 50,
        unread_only: bool = False,
    ) -> tuple[list[Notification], int]:
        """Return ``(notifications, unread_count)`` for one recipient."""
        params: dict[str, Any] = {"limit": limit}
        if unread_only:
            params["unreadOnly"] = "true"
        envelope = self._api.get(self._path(feed_segment(role), user_id), params=params)
        notifications = self._many(envelope, Notification, "notifications")
        unread = envelope.payload("unreadCount")
        if not isinstance(unread, int):
            unread = sum(1 for n in notifications if not n.is_read)
        return notifications, unread

    def mark_read(self, notification_id: str) -> None:
        self._api.patch(self._path(notification_id, "read"))

    def mark_all_read(self, role: str, user_id: str) -> None:
        self._api.patch(self._path(feed_segment(role), user_id, "mark-all-read"))
