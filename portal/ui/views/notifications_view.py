"""
Notifications View.

The signed-in user's notification feed, newest first, with per-item
and bulk mark-as-read.  The feed re-polls on a fixed interval and
reports the unread count so the sidebar tag stays current.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from portal.logger import StructuredLogger
from portal.models.enums import NotificationPriority
from portal.models.notification import Notification, NotificationFeed
from portal.models.service_models import ServiceResult
from portal.services.notification_service import NotificationService
from portal.ui.theme import (
    CONTENT_CARD_BG,
    ERROR_TEXT,
    FONT_BODY,
    FONT_CAPTION,
    FONT_SUBHEADING,
    PADDING_MD,
    PADDING_SM,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
    UNREAD_DOT,
)
from portal.ui.views.list_view import PortalListView
from portal.utils.general import format_date

_UNREAD_BG: str = "#eff6ff"
_URGENT: frozenset[str] = frozenset({NotificationPriority.HIGH, NotificationPriority.URGENT})


class NotificationsView(PortalListView):
    """Notification feed with polling.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    notification_service:
        Reads the feed and marks notifications read.
    poll_interval_s:
        Seconds between automatic re-fetches; ``0`` disables polling.
    on_unread_changed:
        Called on the UI thread with the unread count after each fetch.
    logger:
        Structured logger instance.
    """

    TITLE = "Notifications"
    SUBTITLE = "Updates about your applications, TNAs and meetings"
    EMPTY_TEXT = "You're all caught up."

    def __init__(
        self,
        parent: ctk.CTkFrame,
        notification_service: NotificationService,
        poll_interval_s: int,
        logger: StructuredLogger,
        on_unread_changed: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._service = notification_service
        self._poll_interval_ms = max(0, int(poll_interval_s)) * 1000
        self._on_unread_changed = on_unread_changed
        self._poll_job: Optional[str] = None
        super().__init__(parent, logger)

        self._mark_all_btn = ctk.CTkButton(
            self._header_extra,
            text="✓  Mark all read",
            font=FONT_BODY,
            fg_color="transparent",
            border_width=1,
            border_color=TEXT_SECONDARY,
            text_color=TEXT_PRIMARY,
            hover_color=_UNREAD_BG,
            width=130,
            height=34,
            command=self._mark_all_read,
        )
        self._mark_all_btn.pack(side="right")
        self._schedule_poll()

    # ------------------------------------------------------------------
    # Fetch / render
    # ------------------------------------------------------------------

    def _fetch(self) -> ServiceResult[NotificationFeed]:
        return self._service.get_feed()

    def _render(self, feed: NotificationFeed) -> None:
        if self._on_unread_changed is not None:
            self._on_unread_changed(feed.unread_count)
        if not feed.notifications:
            self._show_empty()
            return
        for notification in feed.notifications:
            self._build_row(notification)

    def _build_row(self, notification: Notification) -> None:
        card = self._card()
        if not notification.is_read:
            card.configure(fg_color=_UNREAD_BG)

        top = ctk.CTkFrame(card, fg_color="transparent")
        top.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 2))
        if not notification.is_read:
            ctk.CTkLabel(top, text="●", font=FONT_CAPTION, text_color=UNREAD_DOT, width=14).pack(side="left")
        ctk.CTkLabel(
            top,
            text=notification.title or "Notification",
            font=FONT_SUBHEADING,
            text_color=ERROR_TEXT if notification.priority in _URGENT else TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left")
        if notification.created_at is not None:
            ctk.CTkLabel(
                top,
                text=format_date(notification.created_at),
                font=FONT_CAPTION,
                text_color=TEXT_SECONDARY,
            ).pack(side="right")

        ctk.CTkLabel(
            card,
            text=notification.message,
            font=FONT_BODY,
            text_color=TEXT_PRIMARY,
            anchor="w",
            justify="left",
            wraplength=760,
        ).pack(fill="x", padx=PADDING_MD, pady=(0, PADDING_SM))

        if not notification.is_read and notification.id:
            actions = ctk.CTkFrame(card, fg_color="transparent")
            actions.pack(fill="x", padx=PADDING_MD)
            self._action_button(
                actions, "Mark read", lambda n=notification: self._mark_read(n), TEXT_SECONDARY,
            )
        else:
            card.configure(fg_color=CONTENT_CARD_BG)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _mark_read(self, notification: Notification) -> None:
        self._run_action("Mark as read", lambda: self._service.mark_read(notification.id or ""))

    def _mark_all_read(self) -> None:
        self._run_action("Mark all as read", self._service.mark_all_read)

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def _schedule_poll(self) -> None:
        if self._poll_interval_ms:
            self._poll_job = self.after(self._poll_interval_ms, self._poll)

    def _poll(self) -> None:
        if not self.winfo_exists():
            return
        self.refresh()
        self._schedule_poll()

    def destroy(self) -> None:
        """Stop polling before destroying the widget."""
        if self._poll_job is not None:
            self.after_cancel(self._poll_job)
            self._poll_job = None
        super().destroy()
