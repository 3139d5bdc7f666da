"""
Notification Model.

In-app notifications addressed to one recipient.  Expired notifications
are still returned by the server; the client filters them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from portal.models.base import PortalDocument
from portal.models.enums import NotificationPriority


class Notification(PortalDocument):
    """Represents one notification addressed to the current user."""

    title: str = ""
    message: str = ""
    recipient_id: Optional[str] = None
    recipient_type: Optional[str] = None
    type: str = "general"
    related_entity_type: str = "general"
    related_entity_id: Optional[str] = None
    action_url: Optional[str] = None
    action_text: str = "View Details"
    is_read: bool = False
    read_at: Optional[datetime] = None
    priority: str = NotificationPriority.MEDIUM
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """``True`` once ``expires_at`` has passed.  Never-expiring when unset."""
        if self.expires_at is None:
            return False
        current = now or datetime.now(timezone.utc)
        expires = self.expires_at
        # Naive timestamps from the server are UTC.
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current > expires


class NotificationFeed(BaseModel):
    """Live (unexpired) notifications for one user plus the unread badge count."""

    notifications: list[Notification] = Field(default_factory=list)
    unread_count: int = 0
