"""Signed-In Screen.

Sidebar on the left, the active module on the right.  Module frames are
built on first visit and kept alive while the user stays signed in, so
switching back to a list does not refetch it.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.ui.module_registry import ModuleRegistry
from portal.ui.sidebar import SidebarNav
from portal.ui.theme import CONTENT_BG, FONT_BODY, TEXT_SECONDARY


class ModuleHost(ctk.CTkFrame):
    """Everything shown between login and logout."""

    def __init__(
        self,
        parent: ctk.CTk,
        registry: ModuleRegistry,
        session: SessionManager,
        on_logout: Callable[[], None],
        logger: StructuredLogger,
        version: str = "",
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG, corner_radius=0)
        self._registry = registry
        self._logger = logger
        self._frames: dict[str, ctk.CTkFrame] = {}
        self._current: Optional[str] = None

        role = session.get_current_user().role
        self._visible = {entry.module_id for entry in registry.get_modules_for_role(role)}

        self._sidebar = SidebarNav(
            parent=self,
            on_module_selected=self.open,
            on_logout=on_logout,
            session=session,
            logger=logger,
            version=version,
        )
        self._sidebar.pack(side="left", fill="y")
        self._sidebar.add_modules(registry.get_modules_for_role(role))

        self._content = ctk.CTkFrame(self, fg_color=CONTENT_BG, corner_radius=0)
        self._content.pack(side="left", fill="both", expand=True)

        start = registry.default_module_for_role(role)
        if start:
            self.open(start)
        else:
            self._logger.warning("Role '%s' has no modules.", role)
            ctk.CTkLabel(
                self._content,
                text="No modules are available for your role. Contact your administrator.",
                font=FONT_BODY,
                text_color=TEXT_SECONDARY,
            ).place(relx=0.5, rely=0.5, anchor="center")

    def shows(self, module_id: str) -> bool:
        return module_id in self._visible

    def open(self, module_id: str) -> None:
        """Bring *module_id* forward, building its frame on first use."""
        if module_id == self._current or module_id not in self._visible:
            return
        frame = self._frames.get(module_id)
        if frame is None:
            frame = self._registry.get_module(module_id).factory(self._content)
            self._frames[module_id] = frame
        if self._current is not None:
            self._frames[self._current].pack_forget()
        frame.pack(fill="both", expand=True)
        self._current = module_id
        self._sidebar.set_active(module_id)
        self._logger.info("Opened module %s.", module_id)

    def set_count(self, module_id: str, count: int) -> None:
        self._sidebar.set_count(module_id, count)
