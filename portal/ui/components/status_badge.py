"""
Status Badge Component.

Pill-shaped tag rendering either a resolved ``StatusBadge`` (colour key
+ text) or an enrollment badge variant with its label.  The widget
never derives a status itself; callers pass what the resolver produced.
"""

from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from portal.models.enums import BadgeColor, BadgeVariant
from portal.models.status_models import StatusBadge as BadgeData
from portal.ui.theme import BADGE_COLORS, BADGE_VARIANT_COLORS, FONT_BADGE


class StatusBadge(ctk.CTkLabel):
    """Coloured status tag.

    Parameters
    ----------
    parent:
        Containing widget.
    badge:
        Optional resolved badge to show immediately.
    """

    def __init__(self, parent: ctk.CTkBaseClass, badge: Optional[BadgeData] = None) -> None:
        super().__init__(
            parent,
            text="",
            font=FONT_BADGE,
            corner_radius=10,
            height=22,
            padx=10,
        )
        if badge is not None:
            self.show_badge(badge)

    def show_badge(self, badge: BadgeData) -> None:
        self._paint(badge.color, badge.text)

    def show_variant(self, variant: BadgeVariant, label: str) -> None:
        self._paint(BADGE_VARIANT_COLORS.get(variant, BadgeColor.GRAY), label)

    def _paint(self, color: str, text: str) -> None:
        background, foreground = BADGE_COLORS.get(color, BADGE_COLORS[BadgeColor.GRAY])
        self.configure(text=text, fg_color=background, text_color=foreground)
