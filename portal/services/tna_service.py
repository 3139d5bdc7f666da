"""
TNA Service.

Scheduling, on-site progress, report handling and the DOST-MIMAROPA
review of Technology Needs Assessments.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.document import DownloadedFile
from portal.models.enums import ReviewStatus, TnaStatus
from portal.models.service_models import ServiceResult
from portal.models.tna import TnaRecord
from portal.repositories.tna_repository import TnaRepository
from portal.services.base_service import BaseService
from portal.utils.audit import log_audit_event
from portal.utils.general import file_part

REVIEW_DECISIONS: frozenset[str] = frozenset(
    {ReviewStatus.APPROVED, ReviewStatus.REJECTED, ReviewStatus.RETURNED}
)


class TnaService(BaseService):
    """Service layer for TNA records."""

    def __init__(
        self,
        repo: TnaRepository,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger, session)
        self._repo = repo

    def schedule(
        self,
        application_id: str,
        proponent_id: str,
        scheduled_date: Union[date, str],
        scheduled_time: str,
        location: str,
        *,
        contact_person: Optional[str] = None,
        contact_phone: Optional[str] = None,
        notes: Optional[str] = None,
        assessors: Optional[list[dict[str, Any]]] = None,
    ) -> ServiceResult[TnaRecord]:
        """Schedule a TNA visit.  Date, time and location are required."""
        if not scheduled_date or not str(scheduled_time).strip() or not str(location).strip():
            return self._invalid("Date, time and location are required to schedule a TNA.")
        if not application_id or not proponent_id:
            return self._invalid("Select the application to schedule.")
        payload: dict[str, Any] = {
            "application_id": application_id,
            "proponent_id": proponent_id,
            "scheduled_date": scheduled_date,
            "scheduled_time": str(scheduled_time).strip(),
            "location": str(location).strip(),
            "contact_person": contact_person,
            "contact_phone": contact_phone,
            "notes": notes,
            "assessors": assessors,
        }
        result = self._call("schedule_tna", lambda: self._repo.schedule(payload))
        if result.success:
            self._logger.info(
                "TNA scheduled for application %s on %s.",
                application_id,
                scheduled_date.isoformat() if isinstance(scheduled_date, (date, datetime)) else scheduled_date,
            )
        return result

    def list_tnas(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> ServiceResult[list[TnaRecord]]:
        return self._call("list_tnas", lambda: self._repo.list_all(status, page, limit))

    def mark_in_progress(self, tna: TnaRecord) -> ServiceResult[TnaRecord]:
        if tna.status != TnaStatus.SCHEDULED:
            return self._invalid("Only scheduled TNAs can be started.")
        return self._call("mark_in_progress", lambda: self._repo.mark_in_progress(tna.id or ""))

    def mark_completed(self, tna: TnaRecord) -> ServiceResult[TnaRecord]:
        if tna.status not in (TnaStatus.SCHEDULED, TnaStatus.IN_PROGRESS):
            return self._invalid("Only scheduled or in-progress TNAs can be completed.")
        return self._call("mark_completed", lambda: self._repo.mark_completed(tna.id or ""))

    def upload_report(self, tna_id: str, report_path: Path) -> ServiceResult[dict[str, Any]]:
        try:
            part = file_part(report_path)
        except OSError as exc:
            return self._invalid(f"Could not read report: {exc}")
        return self._call("upload_report", lambda: self._repo.upload_report(tna_id, part))

    def download_report(self, tna_id: str) -> ServiceResult[DownloadedFile]:
        return self._call("download_report", lambda: self._repo.download_report(tna_id))

    def forward_to_dost(self, tna: TnaRecord) -> ServiceResult[TnaRecord]:
        """Forward a TNA with an uploaded report to DOST-MIMAROPA."""
        if not tna.has_report:
            return self._invalid("Upload the TNA report before forwarding.")
        return self._call("forward_to_dost", lambda: self._repo.forward_to_dost(tna.id or ""))

    def reports_for_dost(self) -> ServiceResult[list[TnaRecord]]:
        return self._call("reports_for_dost", self._repo.reports_for_dost)

    def review_report(self, tna_id: str, decision: str, comments: str = "") -> ServiceResult[TnaRecord]:
        if decision not in REVIEW_DECISIONS:
            return self._invalid("Decision must be approved, rejected or returned.")
        if decision != ReviewStatus.APPROVED and not comments.strip():
            return self._invalid("Comments are required when the report is not approved.")
        result = self._call(
            "review_report", lambda: self._repo.review_report(tna_id, decision, comments.strip()),
        )
        if result.success:
            user = self._session.current_user if self._session else None
            log_audit_event(
                self._logger,
                action="TNA_REPORT_REVIEW",
                entity_type="TNA",
                entity_id=tna_id,
                user_id=(user.id if user else None) or "unknown",
                details={"decision": decision},
            )
        return result

    def approved_tnas(self) -> ServiceResult[list[TnaRecord]]:
        return self._call("approved_tnas", self._repo.approved)

    def upload_signed_report(self, tna_id: str, report_path: Path) -> ServiceResult[dict[str, Any]]:
        try:
            part = file_part(report_path)
        except OSError as exc:
            return self._invalid(f"Could not read report: {exc}")
        return self._call("upload_signed_report", lambda: self._repo.upload_signed_report(tna_id, part))

    def download_signed_report(self, tna_id: str) -> ServiceResult[DownloadedFile]:
        return self._call("download_signed_report", lambda: self._repo.download_signed_report(tna_id))
