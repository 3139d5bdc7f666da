"""
Notification Service.

Reads the current user's notification feed (chosen by role), hides
expired entries, and marks notifications read.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.notification import Notification, NotificationFeed
from portal.models.service_models import ServiceResult
from portal.models.user import User
from portal.repositories.notification_repository import NotificationRepository
from portal.services.base_service import BaseService


def filter_expired(
    notifications: list[Notification], now: Optional[datetime] = None,
) -> list[Notification]:
    """Drop notifications whose ``expires_at`` has passed."""
    return [n for n in notifications if not n.is_expired(now)]


class NotificationService(BaseService):
    """Service layer for the in-app notification feed."""

    def __init__(
        self,
        repo: NotificationRepository,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger, session)
        self._repo = repo

    def _user(self) -> Optional[User]:
        return self._session.current_user if self._session else None

    def get_feed(self, *, unread_only: bool = False, limit: int = 50) -> ServiceResult[NotificationFeed]:
        """Notifications for the signed-in user, newest first, expired ones removed.

        The unread count is recomputed from the filtered list so an
        expired unread notification never keeps the badge lit.
        """
        user = self._user()
        if user is None or not user.id:
            return ServiceResult(success=False, error="Please login first", status_code=401)

        result = self._call(
            "notification_feed",
            lambda: self._repo.list_for(user.role, user.id, limit=limit, unread_only=unread_only),  # type: ignore[arg-type]
        )
        if not result.success or result.data is None:
            return ServiceResult(success=False, error=result.error, status_code=result.status_code)

        notifications, _server_unread = result.data
        live = filter_expired(notifications)
        return ServiceResult(
            success=True,
            data=NotificationFeed(
                notifications=live,
                unread_count=sum(1 for n in live if not n.is_read),
            ),
        )

    def unread_count(self) -> ServiceResult[int]:
        feed = self.get_feed(unread_only=True)
        if not feed.success or feed.data is None:
            return ServiceResult(success=False, error=feed.error, status_code=feed.status_code)
        return ServiceResult(success=True, data=feed.data.unread_count)

    def mark_read(self, notification_id: str) -> ServiceResult[None]:
        return self._call("mark_notification_read", lambda: self._repo.mark_read(notification_id))

    def mark_all_read(self) -> ServiceResult[None]:
        user = self._user()
        if user is None or not user.id:
            return ServiceResult(success=False, error="Please login first", status_code=401)
        return self._call(
            "mark_all_notifications_read",
            lambda: self._repo.mark_all_read(user.role, user.id),  # type: ignore[arg-type]
        )
