"""
Stage Tracker Component.

Horizontal row of stage dots (TNA, RTEC, funding ...) coloured by
completion state.  Stages the enrollment may not open yet are drawn
locked and do not respond to clicks.
"""

from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from portal.models.enums import StageState
from portal.models.status_models import StageView, StatusView
from portal.ui.theme import (
    FONT_CAPTION,
    FONT_SMALL,
    PADDING_SM,
    STAGE_DOT_SIZE,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_STATE_GLYPHS: dict[str, str] = {
    StageState.COMPLETED: "✓",
    StageState.CURRENT: "●",
    StageState.PENDING: "",
}
_LOCK_GLYPH: str = "🔒"


class StageTracker(ctk.CTkFrame):
    """Stage progress strip for one enrollment.

    Parameters
    ----------
    parent:
        Containing widget.
    on_stage_selected:
        Optional callback receiving the ``stage_id`` of an accessible
        stage the user clicked.
    """

    def __init__(
        self,
        parent: ctk.CTkBaseClass,
        on_stage_selected: Optional[Callable[[str], None]] = None,
    ) -> None:
        super().__init__(parent, fg_color="transparent")
        self._on_stage_selected = on_stage_selected

    def show(self, view: StatusView) -> None:
        """Redraw the strip from a resolved ``StatusView``."""
        for child in self.winfo_children():
            child.destroy()
        for column, stage in enumerate(view.stages):
            self._build_stage(column, stage)

    def _build_stage(self, column: int, stage: StageView) -> None:
        cell = ctk.CTkFrame(self, fg_color="transparent")
        cell.grid(row=0, column=column, padx=(0, PADDING_SM), sticky="n")

        glyph = _STATE_GLYPHS.get(stage.state, "")
        if not stage.accessible:
            glyph = _LOCK_GLYPH
        dot = ctk.CTkButton(
            cell,
            text=glyph,
            font=FONT_CAPTION,
            width=STAGE_DOT_SIZE,
            height=STAGE_DOT_SIZE,
            corner_radius=STAGE_DOT_SIZE // 2,
            fg_color=stage.color,
            hover_color=stage.color,
            text_color=TEXT_LIGHT,
            state="normal" if stage.accessible and self._on_stage_selected else "disabled",
            command=lambda stage_id=stage.stage_id: self._select(stage_id),
        )
        dot.pack()

        ctk.CTkLabel(
            cell,
            text=stage.name,
            font=FONT_SMALL,
            text_color=TEXT_PRIMARY if stage.accessible else TEXT_SECONDARY,
        ).pack()

    def _select(self, stage_id: str) -> None:
        if self._on_stage_selected is not None:
            self._on_stage_selected(stage_id)
