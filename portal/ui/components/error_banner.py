"""
Error Banner Component.

Inline failure notice with a Retry button.  Retry re-invokes the fetch
the owning view registered, so the same request is simply issued again.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from portal.ui.theme import (
    CORNER_RADIUS,
    ERROR_BG,
    ERROR_BORDER,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BUTTON,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
)


class ErrorBanner(ctk.CTkFrame):
    """Red notice bar shown above a view's content when a fetch fails.

    The banner starts hidden; ``show()`` packs it with the message and
    ``hide()`` removes it from the layout again.

    Parameters
    ----------
    parent:
        Owning view.
    on_retry:
        Called when the user presses Retry.
    """

    def __init__(self, parent: ctk.CTkFrame, on_retry: Callable[[], None]) -> None:
        super().__init__(
            parent,
            fg_color=ERROR_BG,
            border_color=ERROR_BORDER,
            border_width=1,
            corner_radius=CORNER_RADIUS,
        )
        self._on_retry = on_retry
        self._pending_retry: Optional[Callable[[], None]] = None

        self._message = ctk.CTkLabel(
            self,
            text="",
            font=FONT_BODY,
            text_color=ERROR_TEXT,
            anchor="w",
            justify="left",
            wraplength=640,
        )
        self._message.pack(side="left", fill="x", expand=True, padx=PADDING_MD, pady=PADDING_SM)

        ctk.CTkButton(
            self,
            text="↻  Retry",
            font=FONT_BUTTON,
            fg_color=ERROR_TEXT,
            hover_color="#b91c1c",
            text_color=TEXT_LIGHT,
            width=90,
            height=30,
            corner_radius=CORNER_RADIUS,
            command=self._retry,
        ).pack(side="right", padx=PADDING_SM, pady=PADDING_SM)

    @property
    def message(self) -> str:
        return str(self._message.cget("text"))

    def show(
        self,
        message: str,
        retry: Optional[Callable[[], None]] = None,
        **pack_options: object,
    ) -> None:
        """Display *message*.

        *retry* replaces the default Retry action until the banner is
        next hidden, so a failed write can be re-issued as-is.  Pack
        options default to a full-width strip.
        """
        self._pending_retry = retry
        self._message.configure(text=message or "Something went wrong.")
        if not self.winfo_manager():
            options = {"fill": "x", "padx": 0, "pady": (0, PADDING_SM)}
            options.update(pack_options)
            self.pack(**options)

    def hide(self) -> None:
        self._pending_retry = None
        self._message.configure(text="")
        self.pack_forget()

    def _retry(self) -> None:
        action = self._pending_retry or self._on_retry
        self.hide()
        action()
