"""Sidebar Navigation.

Left rail of the host shell: who is signed in (name, role, province),
one entry per module the role may open, a count tag per entry, and
the logout button.  Every click is forwarded to a shell callback.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import customtkinter as ctk

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.enums import UserRole
from portal.ui.module_registry import ModuleEntry
from portal.ui.theme import (
    ACCENT_PRIMARY,
    FONT_BODY,
    FONT_CAPTION,
    FONT_SIDEBAR,
    FONT_SIDEBAR_ACTIVE,
    FONT_SMALL,
    FONT_SUBHEADING,
    LOGOUT_HOVER,
    LOGOUT_PRIMARY,
    PADDING_MD,
    PADDING_SM,
    SIDEBAR_ACTIVE,
    SIDEBAR_BG,
    SIDEBAR_HOVER,
    SIDEBAR_TEXT,
    SIDEBAR_WIDTH,
    TEXT_LIGHT,
    UNREAD_DOT,
)

_ROLE_LABELS: dict[str, str] = {
    UserRole.PROPONENT: "Proponent",
    UserRole.PSTO: "PSTO",
    UserRole.DOST_MIMAROPA: "DOST-MIMAROPA",
    UserRole.SUPER_ADMIN: "Super Admin",
}


def role_label(role: str) -> str:
    """``dost_mimaropa`` -> ``DOST-MIMAROPA``; unknown roles are title-cased."""
    return _ROLE_LABELS.get(role, role.replace("_", " ").title())


def initials(full_name: str) -> str:
    words = full_name.split()
    if not words:
        return "?"
    picked = words[0][0] + (words[-1][0] if len(words) > 1 else "")
    return picked.upper()


class _NavEntry(ctk.CTkFrame):
    """Sidebar button plus a count tag that hides itself at zero."""

    def __init__(self, parent: ctk.CTkFrame, entry: ModuleEntry, on_click: Callable[[str], None]) -> None:
        super().__init__(parent, fg_color="transparent")
        self.button = ctk.CTkButton(
            self,
            text=f"  {entry.icon}   {entry.display_name}",
            anchor="w",
            height=40,
            corner_radius=6,
            font=FONT_SIDEBAR,
            text_color=SIDEBAR_TEXT,
            fg_color="transparent",
            hover_color=SIDEBAR_HOVER,
            command=lambda: on_click(entry.module_id),
        )
        self.button.pack(side="left", fill="x", expand=True)
        self.tag = ctk.CTkLabel(
            self, text="", width=22, height=18, corner_radius=9,
            font=FONT_CAPTION, text_color=TEXT_LIGHT, fg_color=UNREAD_DOT,
        )

    def highlight(self, on: bool) -> None:
        self.button.configure(
            fg_color=SIDEBAR_ACTIVE if on else "transparent",
            font=FONT_SIDEBAR_ACTIVE if on else FONT_SIDEBAR,
        )

    def show_count(self, count: int) -> None:
        if count <= 0:
            self.tag.pack_forget()
            return
        self.tag.configure(text=str(count) if count < 100 else "99+")
        self.tag.pack(side="right", padx=(0, PADDING_SM))


class SidebarNav(ctk.CTkFrame):
    """Navigation rail.

    Parameters
    ----------
    parent:
        The shell window.
    on_module_selected:
        Receives the ``module_id`` of a clicked entry.
    on_logout:
        Invoked by the logout button.
    session:
        Read once, to render the identity block.
    logger:
        Structured logger instance.
    version:
        Client version printed at the bottom; omitted when empty.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        on_module_selected: Callable[[str], None],
        on_logout: Callable[[], None],
        session: SessionManager,
        logger: StructuredLogger,
        version: str = "",
    ) -> None:
        super().__init__(parent, width=SIDEBAR_WIDTH, fg_color=SIDEBAR_BG, corner_radius=0)
        self.pack_propagate(False)
        self._on_module_selected = on_module_selected
        self._logger = logger
        self._entries: dict[str, _NavEntry] = {}
        self._current: Optional[str] = None

        self._identity(session)
        self._divider()
        self._nav = ctk.CTkFrame(self, fg_color="transparent")
        self._nav.pack(fill="both", expand=True, pady=PADDING_SM)
        self._footer(on_logout, version)

    # -- Public API ------------------------------------------------------------

    def add_modules(self, entries: Iterable[ModuleEntry]) -> None:
        for entry in entries:
            nav = _NavEntry(self._nav, entry, self._on_module_selected)
            nav.pack(fill="x", padx=PADDING_SM, pady=2)
            self._entries[entry.module_id] = nav

    def set_active(self, module_id: str) -> None:
        for key in (self._current, module_id):
            if key in self._entries:
                self._entries[key].highlight(key == module_id)
        self._current = module_id

    def set_count(self, module_id: str, count: int) -> None:
        nav = self._entries.get(module_id)
        if nav is not None:
            nav.show_count(count)
        else:
            self._logger.debug("Count for hidden module %s ignored.", module_id)

    # -- Layout ----------------------------------------------------------------

    def _identity(self, session: SessionManager) -> None:
        user = session.get_current_user()
        block = ctk.CTkFrame(self, fg_color="transparent")
        block.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, PADDING_SM))

        badge = ctk.CTkLabel(
            block, text=initials(user.full_name), width=40, height=40, corner_radius=20,
            fg_color=ACCENT_PRIMARY, text_color=TEXT_LIGHT, font=FONT_SUBHEADING,
        )
        badge.pack(side="left", padx=(0, 10))

        names = ctk.CTkFrame(block, fg_color="transparent")
        names.pack(side="left", fill="x", expand=True)
        details = " • ".join(p for p in (role_label(user.role), user.province) if p)
        for text, font in ((user.full_name, FONT_SIDEBAR_ACTIVE), (details, FONT_SMALL)):
            ctk.CTkLabel(
                names, text=text, font=font, anchor="w",
                text_color=TEXT_LIGHT if font is FONT_SIDEBAR_ACTIVE else SIDEBAR_TEXT,
            ).pack(fill="x")

    def _divider(self, **pack_options: object) -> None:
        ctk.CTkFrame(self, height=1, fg_color=SIDEBAR_HOVER).pack(
            fill="x", padx=PADDING_MD, pady=PADDING_SM, **pack_options,
        )

    def _footer(self, on_logout: Callable[[], None], version: str) -> None:
        if version:
            ctk.CTkLabel(self, text=f"v{version}", font=FONT_CAPTION, text_color=SIDEBAR_TEXT).pack(
                side="bottom", pady=(0, PADDING_SM),
            )
        ctk.CTkButton(
            self,
            text="  ⏻   Log Out",
            anchor="w",
            height=36,
            corner_radius=6,
            font=FONT_BODY,
            text_color=LOGOUT_PRIMARY,
            fg_color="transparent",
            hover_color=LOGOUT_HOVER,
            command=on_logout,
        ).pack(side="bottom", fill="x", padx=PADDING_SM, pady=PADDING_SM)
        self._divider(side="bottom")
