"""
Application Monitor View.

Proponents track their own applications across every program; PSTO
staff work the review queue for their province, open the submitted
files and record approve / return / reject decisions.
"""

from __future__ import annotations

from typing import Any, Optional

import customtkinter as ctk

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.application import ProgramApplication
from portal.models.enums import ReviewStatus, UserRole
from portal.models.service_models import ServiceResult
from portal.models.status_models import StatusBadge as BadgeData
from portal.services.application_service import ApplicationService
from portal.services.document_service import DocumentService
from portal.services.status_resolver import get_review_status_color, resolve_status_badge
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

_RETURN_COLOR: str = "#ea580c"
_OPEN_PSTO_STATES: frozenset[Optional[str]] = frozenset(
    {None, "", ReviewStatus.PENDING, ReviewStatus.UNDER_REVIEW}
)


def _label(value: str) -> str:
    return value.replace("_", " ").title()


class ApplicationMonitorView(PortalListView):
    """Program application list for proponents and the PSTO queue.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    application_service:
        Reads applications and records PSTO decisions.
    document_service:
        Saves and opens served attachment files.
    session:
        Decides between the proponent list and the PSTO queue.
    logger:
        Structured logger instance.
    """

    TITLE = "Applications"
    EMPTY_TEXT = "No applications to show."

    def __init__(
        self,
        parent: ctk.CTkFrame,
        application_service: ApplicationService,
        document_service: DocumentService,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        self._service = application_service
        self._documents = document_service
        self._session = session
        user = session.current_user
        self._is_proponent = user is None or user.role == UserRole.PROPONENT
        self.SUBTITLE = (
            "Your SETUP, GIA, CEST and SSCP applications"
            if self._is_proponent
            else "Applications waiting for PSTO review"
        )
        super().__init__(parent, logger)

    def _fetch(self) -> ServiceResult[list[ProgramApplication]]:
        if self._is_proponent:
            return self._service.my_applications()
        return self._service.psto_queue()

    def _render(self, applications: list[ProgramApplication]) -> None:
        if not applications:
            self._show_empty()
            return
        for application in applications:
            self._build_row(application)

    def _build_row(self, application: ProgramApplication) -> None:
        card = self._card()

        top = ctk.CTkFrame(card, fg_color="transparent")
        top.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))
        ctk.CTkLabel(
            top,
            text=application.enterprise_name or application.display_id,
            font=FONT_SUBHEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left")
        StatusBadge(top, resolve_status_badge(application.status)).pack(side="right")
        if application.psto_status:
            StatusBadge(
                top,
                BadgeData(
                    color=get_review_status_color(application.psto_status),
                    text=f"PSTO: {_label(application.psto_status)}",
                ),
            ).pack(side="right", padx=(0, PADDING_SM))

        details = " • ".join(
            part
            for part in (
                application.display_id,
                application.program_code,
                application.province,
                format_date(application.created_at, with_time=False) if application.created_at else None,
            )
            if part
        )
        ctk.CTkLabel(card, text=details, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w").pack(
            fill="x", padx=PADDING_MD,
        )
        if application.psto_comments:
            ctk.CTkLabel(
                card,
                text=f"PSTO comments: {application.psto_comments}",
                font=FONT_SMALL,
                text_color=TEXT_PRIMARY,
                anchor="w",
                justify="left",
                wraplength=700,
            ).pack(fill="x", padx=PADDING_MD, pady=(4, 0))

        actions = ctk.CTkFrame(card, fg_color="transparent")
        actions.pack(fill="x", padx=PADDING_MD, pady=(PADDING_SM, 0))
        if self._is_proponent:
            if ReviewStatus.RETURNED in (application.status, application.psto_status):
                self._action_button(actions, "Resubmit", lambda a=application: self._resubmit(a))
        else:
            for file_type in list(application.files)[:4]:
                self._action_button(
                    actions,
                    f"Open {_label(file_type)}",
                    lambda a=application, f=file_type: self._open_file(a, f),
                    TEXT_SECONDARY,
                )
            if application.psto_status in _OPEN_PSTO_STATES:
                self._action_button(
                    actions, "Approve", lambda a=application: self._review(a, ReviewStatus.APPROVED), SUCCESS_TEXT,
                )
                self._action_button(
                    actions, "Return", lambda a=application: self._review(a, ReviewStatus.RETURNED), _RETURN_COLOR,
                )
                self._action_button(
                    actions, "Reject", lambda a=application: self._review(a, ReviewStatus.REJECTED), ERROR_TEXT,
                )
        if not actions.winfo_children():
            actions.configure(height=PADDING_SM)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _resubmit(self, application: ProgramApplication) -> None:
        self._run_action("Resubmission", lambda: self._service.resubmit(application))

    def _review(self, application: ProgramApplication, decision: str) -> None:
        comments = ""
        if decision != ReviewStatus.APPROVED:
            dialog = ctk.CTkInputDialog(
                text=f"Comments for the proponent ({_label(decision)}):",
                title="PSTO Review",
            )
            comments = (dialog.get_input() or "").strip()
            if not comments:
                return
        self._run_action(
            "PSTO review",
            lambda: self._service.psto_review(application.id or "", decision, comments),
        )

    def _open_file(self, application: ProgramApplication, file_type: str) -> None:
        def _open() -> ServiceResult[Any]:
            downloaded = self._service.psto_download_file(application.id or "", file_type)
            if not downloaded.success or downloaded.data is None:
                return ServiceResult(
                    success=False, error=downloaded.error, status_code=downloaded.status_code,
                )
            return self._documents.open_downloaded(downloaded.data)

        self._run_action(f"Open {file_type}", _open, refresh=False)
