"""
Enrollments View.

Lists program enrollments with their status badge and stage tracker.
Clicking an open stage marks it complete; reviewers approve or reject
submitted TNAs from the same row.
"""

from __future__ import annotations

from functools import partial
from typing import Callable, Optional

import customtkinter as ctk

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.enrollment import Enrollment
from portal.models.enums import EnrollmentStatus, ReviewStatus, UserRole
from portal.models.service_models import ServiceResult
from portal.services.enrollment_service import EnrollmentService
from portal.ui.components.stage_tracker import StageTracker
from portal.ui.components.status_badge import StatusBadge
from portal.ui.theme import (
    ERROR_TEXT,
    FONT_BODY,
    FONT_SMALL,
    FONT_SUBHEADING,
    PADDING_MD,
    PADDING_SM,
    SUCCESS_TEXT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)
from portal.ui.views.list_view import PortalListView

_ALL: str = "All statuses"
_REVIEWABLE_TNA: frozenset[str] = frozenset({ReviewStatus.PENDING, ReviewStatus.UNDER_REVIEW})
_REVIEWERS: tuple[str, ...] = (UserRole.DOST_MIMAROPA, UserRole.SUPER_ADMIN)


class EnrollmentsView(PortalListView):
    """Enrollment list with per-row badge, stage tracker and TNA review.

    Parameters
    ----------
    parent:
        Content container provided by the Host Shell.
    enrollment_service:
        Reads enrollments, updates stages, reviews TNAs.
    session:
        Supplies the signed-in user's role and province.
    logger:
        Structured logger instance.
    """

    TITLE = "Enrollments"
    SUBTITLE = "Program enrollments and their stage progress"
    EMPTY_TEXT = "No enrollments match the current filter."

    def __init__(
        self,
        parent: ctk.CTkFrame,
        enrollment_service: EnrollmentService,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        self._service = enrollment_service
        self._session = session
        self._status_filter: Optional[str] = None
        super().__init__(parent, logger)

    def _build_toolbar(self, toolbar: ctk.CTkFrame) -> None:
        ctk.CTkLabel(toolbar, text="Status:", font=FONT_SMALL, text_color=TEXT_SECONDARY).pack(
            side="left", padx=(0, PADDING_SM),
        )
        ctk.CTkOptionMenu(
            toolbar,
            values=[_ALL, *(s.value for s in EnrollmentStatus)],
            command=self._on_filter,
            width=200,
        ).pack(side="left")

    def _on_filter(self, choice: str) -> None:
        self._status_filter = None if choice == _ALL else choice
        self.refresh()

    def _fetch(self) -> ServiceResult[list[Enrollment]]:
        user = self._session.current_user
        # PSTO staff only see their own province.
        province = user.province if user is not None and user.role == UserRole.PSTO else None
        return self._service.list_enrollments(province=province, status=self._status_filter)

    def _render(self, enrollments: list[Enrollment]) -> None:
        if not enrollments:
            self._show_empty()
            return
        for enrollment in enrollments:
            self._build_row(enrollment)

    def _build_row(self, enrollment: Enrollment) -> None:
        view = self._service.build_status_view(enrollment)
        card = self._card()

        top = ctk.CTkFrame(card, fg_color="transparent")
        top.pack(fill="x", padx=PADDING_MD, pady=(PADDING_MD, 4))
        ctk.CTkLabel(
            top,
            text=enrollment.customer_name or "Unnamed enterprise",
            font=FONT_SUBHEADING,
            text_color=TEXT_PRIMARY,
            anchor="w",
        ).pack(side="left")
        badge = StatusBadge(top)
        badge.show_variant(view.variant, view.label)
        badge.pack(side="right")

        details = " • ".join(
            part for part in (enrollment.enrollment_id, enrollment.service, enrollment.province) if part
        )
        ctk.CTkLabel(card, text=details, font=FONT_SMALL, text_color=TEXT_SECONDARY, anchor="w").pack(
            fill="x", padx=PADDING_MD,
        )

        on_stage: Optional[Callable[[str], None]] = None
        if self._session.has_role(UserRole.PSTO, *_REVIEWERS):
            on_stage = partial(self._complete_stage, enrollment)
        tracker = StageTracker(card, on_stage_selected=on_stage)
        tracker.show(view)
        tracker.pack(fill="x", padx=PADDING_MD, pady=PADDING_SM)

        if view.conflicts:
            ctk.CTkLabel(
                card,
                text=f"Several stages are marked in progress: {', '.join(view.conflicts)}",
                font=FONT_SMALL,
                text_color=ERROR_TEXT,
                anchor="w",
            ).pack(fill="x", padx=PADDING_MD)

        if self._can_review(enrollment):
            actions = ctk.CTkFrame(card, fg_color="transparent")
            actions.pack(fill="x", padx=PADDING_MD)
            ctk.CTkLabel(
                actions, text="TNA awaiting review", font=FONT_BODY, text_color=TEXT_SECONDARY,
            ).pack(side="left", padx=(0, PADDING_MD), pady=(0, PADDING_MD))
            self._action_button(actions, "Approve", lambda e=enrollment: self._review(e, ReviewStatus.APPROVED), SUCCESS_TEXT)
            self._action_button(actions, "Reject", lambda e=enrollment: self._review(e, ReviewStatus.REJECTED), ERROR_TEXT)
        else:
            ctk.CTkFrame(card, fg_color="transparent", height=PADDING_SM).pack()

    def _can_review(self, enrollment: Enrollment) -> bool:
        return (
            self._session.has_role(*_REVIEWERS)
            and enrollment.status == EnrollmentStatus.SUBMITTED
            and (enrollment.tna_status or ReviewStatus.PENDING) in _REVIEWABLE_TNA
        )

    def _complete_stage(self, enrollment: Enrollment, stage_id: str) -> None:
        self._run_action(
            "Stage update",
            lambda: self._service.update_stage(enrollment, stage_id, completed=True),
        )

    def _review(self, enrollment: Enrollment, decision: str) -> None:
        notes = ""
        if decision == ReviewStatus.REJECTED:
            dialog = ctk.CTkInputDialog(text="Enter the reason for rejecting this TNA:", title="Reject TNA")
            notes = (dialog.get_input() or "").strip()
            if not notes:
                return
        self._run_action(
            "TNA review",
            lambda: self._service.review_tna(enrollment.id or "", decision, notes),
        )
