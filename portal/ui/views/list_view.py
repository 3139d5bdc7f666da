"""
Shared list screen scaffolding.

Every module screen is a header (title + Refresh), an ``ErrorBanner``,
an optional toolbar and a scrollable list.  Fetches and writes run on
daemon worker threads; results are marshalled back to the UI thread
via ``self.after(0, ...)``.

**Thin UI Rule**: subclasses only call services and draw rows.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

import customtkinter as ctk

from portal.logger import StructuredLogger
from portal.models.service_models import ServiceResult
from portal.ui.components.error_banner import ErrorBanner
from portal.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    FONT_BODY,
    FONT_BUTTON,
    FONT_HEADING,
    FONT_SUBTITLE,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_UNAUTHORIZED: int = 401


def guarded_call(
    name: str,
    work: Callable[[], ServiceResult[Any]],
    logger: StructuredLogger,
) -> ServiceResult[Any]:
    """Run *work* on a worker thread without letting an exception kill it.

    Services already turn client failures into a ``ServiceResult``; anything
    that still escapes is logged and becomes a failed result, so the view
    resets its buttons and offers Retry.
    """
    try:
        return work()
    except Exception:
        logger.exception("Background %s failed.", name)
        return ServiceResult(
            success=False,
            error=f"Something went wrong during {name}. Details are in the log.",
            status_code=500,
        )


class PortalListView(ctk.CTkFrame):
    """Base frame for the portal's list screens.

    Subclasses implement ``_fetch`` (runs on a worker thread and returns
    a ``ServiceResult``) and ``_render`` (runs on the UI thread with the
    result's data).  A 401 result draws nothing: the shell is already
    returning to the login screen.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    logger:
        Structured logger instance.
    """

    TITLE: str = ""
    SUBTITLE: str = ""
    EMPTY_TEXT: str = "Nothing to show yet."

    def __init__(self, parent: ctk.CTkFrame, logger: StructuredLogger) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)
        self._logger = logger
        self._loading: bool = False

        self._build_frame()
        self.refresh()

    # ==================================================================
    # Widget construction
    # ==================================================================

    def _build_frame(self) -> None:
        body = ctk.CTkFrame(self, fg_color="transparent")
        body.pack(fill="both", expand=True, padx=PADDING_LG, pady=PADDING_LG)

        header = ctk.CTkFrame(body, fg_color="transparent")
        header.pack(fill="x", pady=(0, PADDING_SM))

        titles = ctk.CTkFrame(header, fg_color="transparent")
        titles.pack(side="left", fill="x", expand=True)
        ctk.CTkLabel(
            titles, text=self.TITLE, font=FONT_HEADING, text_color=TEXT_PRIMARY, anchor="w",
        ).pack(fill="x")
        if self.SUBTITLE:
            ctk.CTkLabel(
                titles, text=self.SUBTITLE, font=FONT_SUBTITLE, text_color=TEXT_SECONDARY, anchor="w",
            ).pack(fill="x")

        self._refresh_btn = ctk.CTkButton(
            header,
            text="↻  Refresh",
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            width=110,
            height=34,
            corner_radius=CORNER_RADIUS,
            command=self.refresh,
        )
        self._refresh_btn.pack(side="right")

        self._header_extra = ctk.CTkFrame(header, fg_color="transparent")
        self._header_extra.pack(side="right", padx=(0, PADDING_SM))

        self._banner_slot = ctk.CTkFrame(body, fg_color="transparent", height=0)
        self._banner_slot.pack(fill="x")
        self._banner = ErrorBanner(self._banner_slot, on_retry=self.refresh)

        self._toolbar = ctk.CTkFrame(body, fg_color="transparent")
        self._toolbar.pack(fill="x", pady=(0, PADDING_SM))
        self._build_toolbar(self._toolbar)

        self._list = ctk.CTkScrollableFrame(body, fg_color="transparent")
        self._list.pack(fill="both", expand=True)

    def _build_toolbar(self, toolbar: ctk.CTkFrame) -> None:
        """Hook for filters; the default toolbar is empty."""

    def _card(self) -> ctk.CTkFrame:
        """A white row card appended to the list."""
        card = ctk.CTkFrame(self._list, fg_color=CONTENT_CARD_BG, corner_radius=CORNER_RADIUS)
        card.pack(fill="x", pady=(0, PADDING_SM))
        return card

    def _show_empty(self, text: Optional[str] = None) -> None:
        ctk.CTkLabel(
            self._list,
            text=text or self.EMPTY_TEXT,
            font=FONT_BODY,
            text_color=TEXT_SECONDARY,
        ).pack(pady=PADDING_LG)

    def _action_button(
        self, parent: ctk.CTkFrame, text: str, command: Callable[[], None], color: str = ACCENT_PRIMARY,
    ) -> ctk.CTkButton:
        button = ctk.CTkButton(
            parent,
            text=text,
            font=FONT_BUTTON,
            fg_color=color,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            height=30,
            width=96,
            corner_radius=CORNER_RADIUS,
            command=command,
        )
        button.pack(side="left", padx=(0, PADDING_SM), pady=(0, PADDING_MD))
        return button

    # ==================================================================
    # Fetch cycle
    # ==================================================================

    def _fetch(self) -> ServiceResult[Any]:
        raise NotImplementedError

    def _render(self, data: Any) -> None:
        raise NotImplementedError

    def refresh(self) -> None:
        """Re-issue the screen's fetch on a worker thread."""
        if self._loading:
            return
        self._loading = True
        self._refresh_btn.configure(state="disabled", text="↻  Loading...")
        self._in_background("fetch", self._fetch, self._apply)

    def _apply(self, result: ServiceResult[Any]) -> None:
        if not self.winfo_exists():
            return
        self._loading = False
        self._refresh_btn.configure(state="normal", text="↻  Refresh")

        if not result.success:
            if result.status_code != _UNAUTHORIZED:
                self._banner.show(result.error or "Could not load data.")
            return

        self._banner.hide()
        for widget in self._list.winfo_children():
            widget.destroy()
        self._render(result.data)

    def _run_action(
        self,
        name: str,
        action: Callable[[], ServiceResult[Any]],
        on_success: Optional[Callable[[Any], None]] = None,
        *,
        refresh: bool = True,
    ) -> None:
        """Run a write on a worker thread, then refresh or show the error.

        On failure the banner's Retry re-runs the same write.
        """

        def _done(result: ServiceResult[Any]) -> None:
            if not self.winfo_exists():
                return
            if result.success:
                self._banner.hide()
                if on_success is not None:
                    on_success(result.data)
                if refresh:
                    self.refresh()
            elif result.status_code != _UNAUTHORIZED:
                self._banner.show(
                    result.error or f"{name} failed.",
                    retry=lambda: self._run_action(name, action, on_success, refresh=refresh),
                )

        self._in_background(name, action, _done)

    def _in_background(
        self,
        name: str,
        work: Callable[[], ServiceResult[Any]],
        deliver: Callable[[ServiceResult[Any]], None],
    ) -> None:
        def _worker() -> None:
            self._post(deliver, guarded_call(name, work, self._logger))

        threading.Thread(target=_worker, name=f"{type(self).__name__}-{name}", daemon=True).start()

    def _post(self, callback: Callable[..., None], *args: Any) -> None:
        """Run *callback* on the UI thread unless the view is gone by then."""

        def _deliver() -> None:
            if self.winfo_exists():
                callback(*args)

        self.after(0, _deliver)
