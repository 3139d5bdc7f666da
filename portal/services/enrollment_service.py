"""
Enrollment Service.

Enrollment list/detail, stage progress and the TNA handshake.  Stage
updates are gated client-side by :func:`can_access_stage`: until the TNA
is approved only the TNA stage may change.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.enrollment import Enrollment, ServiceOption
from portal.models.enums import ReviewStatus
from portal.models.service_models import ServiceResult
from portal.models.status_models import StatusView
from portal.repositories.enrollment_repository import TNA_FILE_FIELDS, EnrollmentRepository
from portal.services.status_resolver import build_status_view, can_access_stage
from portal.services.base_service import BaseService
from portal.utils.audit import log_audit_event
from portal.utils.general import file_part

# ``tnaInfo`` keys the backend refuses to accept without.
REQUIRED_TNA_FIELDS: tuple[str, ...] = (
    "affiliation",
    "contact_person",
    "position",
    "office_address",
    "contact_number",
    "email_address",
)

# Review decision -> ``action`` value of ``POST /enrollments/:id/review-tna``.
_REVIEW_ACTIONS: dict[str, str] = {
    ReviewStatus.APPROVED: "approve",
    ReviewStatus.REJECTED: "reject",
}


class EnrollmentService(BaseService):
    """Service layer for enrollments."""

    def __init__(
        self,
        repo: EnrollmentRepository,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger, session)
        self._repo = repo

    # -- Reads -----------------------------------------------------------------

    def list_enrollments(
        self,
        province: Optional[str] = None,
        status: Optional[str] = None,
        service: Optional[str] = None,
    ) -> ServiceResult[list[Enrollment]]:
        return self._call(
            "list_enrollments",
            lambda: self._repo.list_all(province=province, status=status, service=service),
        )

    def get_enrollment(self, enrollment_id: str) -> ServiceResult[Enrollment]:
        result = self._call("get_enrollment", lambda: self._repo.get_by_id(enrollment_id))
        if result.success and result.data is None:
            return ServiceResult(success=False, error="Enrollment not found.", status_code=404)
        return result

    def get_stats(self, province: Optional[str] = None) -> ServiceResult[dict[str, Any]]:
        return self._call("enrollment_stats", lambda: self._repo.stats(province))

    def get_service_options(self) -> ServiceResult[dict[str, ServiceOption]]:
        return self._call("service_options", self._repo.service_options)

    def tna_for_review(self, status: Optional[str] = None) -> ServiceResult[list[Enrollment]]:
        return self._call("tna_for_review", lambda: self._repo.tna_for_review(status))

    def build_status_view(self, enrollment: Enrollment) -> StatusView:
        """Badge, label and stage states for one enrollment.

        Logs a warning when more than one stage is flagged in progress;
        the view still renders every flagged stage as current.
        """
        view = build_status_view(enrollment)
        if view.conflicts:
            self._logger.warning(
                "Enrollment %s has %d stages in progress: %s",
                enrollment.enrollment_id or enrollment.id,
                len(view.conflicts),
                ", ".join(view.conflicts),
            )
        return view

    # -- Writes ----------------------------------------------------------------

    def create_enrollment(self, payload: dict[str, Any]) -> ServiceResult[Enrollment]:
        if not payload.get("service"):
            return self._invalid("Select a service to enroll in.")
        if not payload.get("customer"):
            return self._invalid("Customer details are required.")
        return self._call("create_enrollment", lambda: self._repo.create(payload))

    def update_enrollment(self, enrollment_id: str, changes: dict[str, Any]) -> ServiceResult[Enrollment]:
        return self._call("update_enrollment", lambda: self._repo.update(enrollment_id, changes))

    def delete_enrollment(self, enrollment_id: str) -> ServiceResult[None]:
        return self._call("delete_enrollment", lambda: self._repo.delete(enrollment_id))

    def update_stage(
        self,
        enrollment: Enrollment,
        stage_id: str,
        completed: bool,
        notes: str = "",
    ) -> ServiceResult[Enrollment]:
        """Mark a stage complete/incomplete.

        Refused with 403 before any request when the stage is locked
        behind an unapproved TNA.
        """
        if not can_access_stage(enrollment, stage_id):
            self._logger.info(
                "Stage %s locked for enrollment %s (tna_status=%s).",
                stage_id,
                enrollment.id,
                enrollment.tna_status,
            )
            return ServiceResult(
                success=False,
                error="This stage opens once the TNA is approved.",
                status_code=403,
            )
        if not enrollment.id:
            return self._invalid("Enrollment has no id.")
        return self._call(
            "update_stage",
            lambda: self._repo.update_stage(enrollment.id, stage_id, completed, notes),  # type: ignore[arg-type]
        )

    def submit_tna(
        self,
        enrollment_id: str,
        tna_info: dict[str, Any],
        attachments: dict[str, Path],
    ) -> ServiceResult[Enrollment]:
        """Submit the TNA form.

        ``attachments`` maps a multipart field name (``letterOfIntent``,
        ``dostTnaForm``, ``enterpriseProfile``) to a local file.
        """
        missing = [f for f in REQUIRED_TNA_FIELDS if not str(tna_info.get(f) or "").strip()]
        if missing:
            return self._invalid(
                "Complete the TNA form: " + ", ".join(m.replace("_", " ") for m in missing) + "."
            )
        unknown = sorted(set(attachments) - set(TNA_FILE_FIELDS))
        if unknown:
            return self._invalid(f"Unknown attachment field(s): {', '.join(unknown)}.")
        try:
            parts = {name: file_part(path) for name, path in attachments.items()}
        except OSError as exc:
            self._logger.warning("Could not read TNA attachment: %s", exc)
            return self._invalid(f"Could not read attachment: {exc}")
        return self._call(
            "submit_tna", lambda: self._repo.submit_tna(enrollment_id, tna_info, parts),
        )

    def review_tna(
        self,
        enrollment_id: str,
        decision: str,
        review_notes: str = "",
    ) -> ServiceResult[Enrollment]:
        """Approve or reject a submitted TNA (``decision``: ``approved|rejected``)."""
        action = _REVIEW_ACTIONS.get(decision)
        if action is None:
            return self._invalid("Decision must be 'approved' or 'rejected'.")
        if decision == ReviewStatus.REJECTED and not review_notes.strip():
            return self._invalid("Add review notes explaining the rejection.")

        reviewer = self._session.current_user if self._session else None
        result = self._call(
            "review_tna",
            lambda: self._repo.review_tna(
                enrollment_id, action, review_notes.strip(), reviewer.id if reviewer else None,
            ),
        )
        if result.success:
            log_audit_event(
                self._logger,
                action="TNA_REVIEW",
                entity_type="Enrollment",
                entity_id=enrollment_id,
                user_id=(reviewer.id if reviewer else None) or "unknown",
                details={"decision": decision},
            )
        return result
