"""
Program Application Service.

Submission and tracking of SETUP / GIA / CEST / SSCP applications by
proponents, and the PSTO review queue.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.application import ProgramApplication
from portal.models.document import DownloadedFile
from portal.models.enums import ProgramCode, ReviewStatus
from portal.models.service_models import ServiceResult
from portal.repositories.application_repository import ApplicationRepository
from portal.services.base_service import BaseService
from portal.utils.audit import log_audit_event
from portal.utils.general import file_part

PSTO_DECISIONS: frozenset[str] = frozenset(
    {ReviewStatus.APPROVED, ReviewStatus.RETURNED, ReviewStatus.REJECTED}
)


class ApplicationService(BaseService):
    """Service layer for program applications."""

    def __init__(
        self,
        repo: ApplicationRepository,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger, session)
        self._repo = repo

    @staticmethod
    def _program_code(program: str) -> Optional[str]:
        try:
            return ProgramCode(str(program).upper())
        except ValueError:
            return None

    # -- Proponent -------------------------------------------------------------

    def submit_application(
        self,
        program: str,
        fields: dict[str, Any],
        attachments: Optional[dict[str, Path]] = None,
    ) -> ServiceResult[ProgramApplication]:
        code = self._program_code(program)
        if code is None:
            return self._invalid(f"Unknown program '{program}'.")
        if not str(fields.get("enterprise_name") or "").strip():
            return self._invalid("Enterprise name is required.")
        try:
            parts = {name: file_part(path) for name, path in (attachments or {}).items()}
        except OSError as exc:
            self._logger.warning("Could not read application attachment: %s", exc)
            return self._invalid(f"Could not read attachment: {exc}")

        result = self._call(
            f"submit_application ({code})", lambda: self._repo.submit(code, fields, parts),
        )
        if result.success:
            self._logger.info("%s application submitted.", code, extra={"event": "APPLICATION_SUBMIT"})
        return result

    def my_applications(
        self, programs: Optional[list[str]] = None,
    ) -> ServiceResult[list[ProgramApplication]]:
        """Every application the current proponent submitted, across programs.

        A failure in any program's list fails the whole call: a partial
        list would read as "nothing submitted" for the missing program.
        """
        codes = [c for c in (self._program_code(p) for p in (programs or list(ProgramCode))) if c]

        def _fetch() -> list[ProgramApplication]:
            collected: list[ProgramApplication] = []
            for code in codes:
                for application in self._repo.my_applications(code):
                    if application.program_code is None:
                        application.program_code = code
                    collected.append(application)
            return collected

        return self._call("my_applications", _fetch)

    def get_application(self, program: str, application_id: str) -> ServiceResult[ProgramApplication]:
        code = self._program_code(program)
        if code is None:
            return self._invalid(f"Unknown program '{program}'.")
        result = self._call("get_application", lambda: self._repo.get_by_id(code, application_id))
        if result.success and result.data is None:
            return ServiceResult(success=False, error="Application not found.", status_code=404)
        return result

    def update_application(
        self, application_id: str, changes: dict[str, Any],
    ) -> ServiceResult[ProgramApplication]:
        return self._call("update_application", lambda: self._repo.update(application_id, changes))

    def upload_documents(
        self, application_id: str, attachments: dict[str, Path],
    ) -> ServiceResult[ProgramApplication]:
        if not attachments:
            return self._invalid("Select at least one document to upload.")
        try:
            parts = {name: file_part(path) for name, path in attachments.items()}
        except OSError as exc:
            return self._invalid(f"Could not read attachment: {exc}")
        return self._call("upload_documents", lambda: self._repo.upload_documents(application_id, parts))

    def resubmit(self, application: ProgramApplication) -> ServiceResult[ProgramApplication]:
        """Resubmit an application the PSTO returned."""
        if application.status != ReviewStatus.RETURNED and application.psto_status != ReviewStatus.RETURNED:
            return self._invalid("Only returned applications can be resubmitted.")
        if not application.id:
            return self._invalid("Application has no id.")
        return self._call("resubmit", lambda: self._repo.resubmit(application.id))  # type: ignore[arg-type]

    def get_stats(self, program: str) -> ServiceResult[dict[str, Any]]:
        code = self._program_code(program)
        if code is None:
            return self._invalid(f"Unknown program '{program}'.")
        return self._call("application_stats", lambda: self._repo.stats(code))

    def download_file(
        self, program: str, application_id: str, file_type: str,
    ) -> ServiceResult[DownloadedFile]:
        code = self._program_code(program)
        if code is None:
            return self._invalid(f"Unknown program '{program}'.")
        return self._call(
            "download_file", lambda: self._repo.download_file(code, application_id, file_type),
        )

    # -- Status ------------------------------------------------------------------

    def update_status(
        self, program: str, application_id: str, status: str, comments: str = "",
    ) -> ServiceResult[ProgramApplication]:
        code = self._program_code(program)
        if code is None:
            return self._invalid(f"Unknown program '{program}'.")
        if not status:
            return self._invalid("Status is required.")
        result = self._call(
            "update_status",
            lambda: self._repo.update_status(code, application_id, status, comments),
        )
        if result.success:
            self._audit("APPLICATION_STATUS", application_id, {"status": status})
        return result

    # -- PSTO queue --------------------------------------------------------------

    def psto_queue(self, status: Optional[str] = None) -> ServiceResult[list[ProgramApplication]]:
        return self._call("psto_queue", lambda: self._repo.psto_applications(status))

    def psto_get(self, application_id: str) -> ServiceResult[ProgramApplication]:
        result = self._call("psto_get", lambda: self._repo.psto_get(application_id))
        if result.success and result.data is None:
            return ServiceResult(success=False, error="Application not found.", status_code=404)
        return result

    def psto_review(
        self, application_id: str, decision: str, comments: str = "",
    ) -> ServiceResult[ProgramApplication]:
        """Record the PSTO decision (``approved|returned|rejected``).

        Returning or rejecting requires comments for the proponent.
        """
        if decision not in PSTO_DECISIONS:
            return self._invalid("Decision must be approved, returned or rejected.")
        if decision != ReviewStatus.APPROVED and not comments.strip():
            return self._invalid("Comments are required when returning or rejecting an application.")
        result = self._call(
            "psto_review", lambda: self._repo.psto_review(application_id, decision, comments.strip()),
        )
        if result.success:
            self._audit("PSTO_REVIEW", application_id, {"decision": decision})
        return result

    def psto_download_file(self, application_id: str, file_type: str) -> ServiceResult[DownloadedFile]:
        return self._call(
            "psto_download_file", lambda: self._repo.psto_download_file(application_id, file_type),
        )

    def _audit(self, action: str, application_id: str, details: dict[str, Any]) -> None:
        user = self._session.current_user if self._session else None
        log_audit_event(
            self._logger,
            action=action,
            entity_type="ProgramApplication",
            entity_id=application_id,
            user_id=(user.id if user else None) or "unknown",
            details=details,
        )
