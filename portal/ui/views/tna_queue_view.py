"""
TNA Queue View.

PSTO staff move scheduled TNAs through the visit (start, complete),
upload the report and forward it to DOST-MIMAROPA.  DOST-MIMAROPA
reviewers see the forwarded reports and approve, return or reject
them.
"""

from __future__ import annotations

from pathlib import Path
from tkinter import filedialog
from typing import Any

import customtkinter as ctk

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.enums import ReviewStatus, TnaStatus, UserRole
from portal.models.service_models import ServiceResult
from portal.models.status_models import StatusBadge as BadgeData
from portal.models.tna import TnaRecord
from portal.services.document_service import DocumentService
from portal.services.status_resolver import get_review_status_color, resolve_status_badge
from portal.services.tna_service import TnaService
from portal.ui.components.status_badge import StatusBadge
from portal.ui.theme import (
    ERROR_TEXT,
    FONT_SMALL,
    FONT_SUBHEADING,
    PADDING_MD,
    PADDING_SM,
    SUCCESS_TEXT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from portal.ui.views.list_view import PortalListView
from portal.utils.general import format_date

_REPORT_TYPES: list[tuple[str, str]] = [
    ("Documents", "*.pdf *.doc *.docx"),
    ("All files", "*.*"),
]
_DOST_ROLES: tuple[str, ...] = (UserRole.DOST_MIMAROPA,)


def _when(tna: TnaRecord) -> str:
    if tna.scheduled_date is None:
        return "Not scheduled"
    text = format_date(tna.scheduled_date, with_time=False)
    return f"{text} {tna.scheduled_time}" if tna.scheduled_time else text


class TnaQueueView(PortalListView):
    """TNA work queue for PSTO staff and DOST-MIMAROPA reviewers.

    Super admins get the PSTO queue; DOST-MIMAROPA gets the forwarded
    reports.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    tna_service:
        TNA transitions, report upload and review.
    document_service:
        Saves and opens downloaded reports.
    session:
        Decides which queue to show.
    logger:
        Structured logger instance.
    """

    TITLE = "TNA Queue"
    EMPTY_TEXT = "No TNAs in this queue."

    def __init__(
        self,
        parent: ctk.CTkFrame,
        tna_service: TnaService,
        document_service: DocumentService,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        self._service = tna_service
        self._documents = document_service
        user = session.current_user
        self._reviewer = user is not None and user.role in _DOST_ROLES
        self.SUBTITLE = (
            "TNA reports forwarded for DOST-MIMAROPA review"
            if self._reviewer
            else "Scheduled assessments and their reports"
        )
        super().__init__(parent, logger)

    def _fetch(self) -> ServiceResult[list[TnaRecord]]:
        if self._reviewer:
            return self._service.reports_for_dost()
        return self._service.list_tnas(limit=100)

    def _render(self, tnas: list[TnaRecord]) -> None:
        if not tnas:
            self._show_empty()
            return
        for tna in tnas:
            self._build_row(tna)

    def _build_row(self, tna: TnaRecord) -> None:
        card = self._card()

        top = ctk.CTkFrame(card, fg_color="transparent")
        top.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))
        ctk.CTkLabel(
            top,
            text=tna.program_name or tna.tna_id or "TNA",
            font=FONT_SUBHEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left")
        StatusBadge(top, resolve_status_badge(tna.status)).pack(side="right")
        if tna.dost_mimaropa_status:
            StatusBadge(
                top,
                BadgeData(
                    color=get_review_status_color(tna.dost_mimaropa_status),
                    text=f"DOST: {tna.dost_mimaropa_status.replace('_', ' ').title()}",
                ),
            ).pack(side="right", padx=(0, PADDING_SM))

        details = " • ".join(part for part in (tna.tna_id, _when(tna), tna.location) if part)
        ctk.CTkLabel(card, text=details, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w").pack(
            fill="x", padx=PADDING_MD,
        )
        if tna.dost_mimaropa_comments:
            ctk.CTkLabel(
                card,
                text=f"Reviewer comments: {tna.dost_mimaropa_comments}",
                font=FONT_SMALL,
                text_color=TEXT_PRIMARY,
                anchor="w",
                justify="left",
                wraplength=700,
            ).pack(fill="x", padx=PADDING_MD, pady=(4, 0))

        actions = ctk.CTkFrame(card, fg_color="transparent")
        actions.pack(fill="x", padx=PADDING_MD, pady=(PADDING_SM, 0))
        if tna.has_report:
            self._action_button(actions, "Open report", lambda t=tna: self._open_report(t), TEXT_SECONDARY)
        if self._reviewer:
            self._build_review_actions(actions, tna)
        else:
            self._build_psto_actions(actions, tna)
        if not actions.winfo_children():
            actions.configure(height=PADDING_SM)

    def _build_psto_actions(self, actions: ctk.CTkFrame, tna: TnaRecord) -> None:
        if tna.status == TnaStatus.SCHEDULED:
            self._action_button(
                actions, "Start", lambda t=tna: self._run_action("Start TNA", lambda: self._service.mark_in_progress(t)),
            )
        if tna.status in (TnaStatus.SCHEDULED, TnaStatus.IN_PROGRESS):
            self._action_button(
                actions,
                "Complete",
                lambda t=tna: self._run_action("Complete TNA", lambda: self._service.mark_completed(t)),
                SUCCESS_TEXT,
            )
        if tna.status in (TnaStatus.COMPLETED, TnaStatus.REPORT_UPLOADED):
            self._action_button(actions, "Upload report", lambda t=tna: self._upload_report(t))
        if tna.has_report and tna.status != TnaStatus.SUBMITTED_TO_DOST:
            self._action_button(
                actions,
                "Forward",
                lambda t=tna: self._run_action("Forward to DOST", lambda: self._service.forward_to_dost(t)),
                SUCCESS_TEXT,
            )

    def _build_review_actions(self, actions: ctk.CTkFrame, tna: TnaRecord) -> None:
        if tna.dost_mimaropa_status in (None, "", ReviewStatus.PENDING, ReviewStatus.UNDER_REVIEW):
            self._action_button(actions, "Approve", lambda t=tna: self._review(t, ReviewStatus.APPROVED), SUCCESS_TEXT)
            self._action_button(actions, "Return", lambda t=tna: self._review(t, ReviewStatus.RETURNED), "#ea580c")
            self._action_button(actions, "Reject", lambda t=tna: self._review(t, ReviewStatus.REJECTED), ERROR_TEXT)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _upload_report(self, tna: TnaRecord) -> None:
        chosen = filedialog.askopenfilename(title="Select TNA report", filetypes=_REPORT_TYPES)
        if not chosen:
            return
        path = Path(chosen)
        self._run_action("Report upload", lambda: self._service.upload_report(tna.id or "", path))

    def _review(self, tna: TnaRecord, decision: str) -> None:
        comments = ""
        if decision != ReviewStatus.APPROVED:
            dialog = ctk.CTkInputDialog(text="Comments for the PSTO:", title="TNA Report Review")
            comments = (dialog.get_input() or "").strip()
            if not comments:
                return
        self._run_action("Report review", lambda: self._service.review_report(tna.id or "", decision, comments))

    def _open_report(self, tna: TnaRecord) -> None:
        def _open() -> ServiceResult[Any]:
            downloaded = self._service.download_report(tna.id or "")
            if not downloaded.success or downloaded.data is None:
                return ServiceResult(
                    success=False, error=downloaded.error, status_code=downloaded.status_code,
                )
            return self._documents.open_downloaded(downloaded.data)

        self._run_action("Open report", _open, refresh=False)
