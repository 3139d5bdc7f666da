"""
Project Document Service.

RTEC, funding and refund document requests: requesting the set from a
proponent, submitting files, reviewing them, and viewing served files
locally.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Optional

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.document import DownloadedFile, ProjectDocuments
from portal.models.enums import DocumentKind, ReviewStatus
from portal.models.service_models import ServiceResult
from portal.repositories.document_repository import ProjectDocumentRepository
from portal.services.base_service import BaseService
from portal.services.native_opener import NativeOpenerService
from portal.utils.audit import log_audit_event
from portal.utils.general import file_part, safe_filename

_REVIEW_ACTIONS: dict[str, str] = {
    ReviewStatus.APPROVED: "approve",
    ReviewStatus.REJECTED: "reject",
}


class DocumentService(BaseService):
    """Service layer over the three document-request families.

    Parameters
    ----------
    repos:
        One ``ProjectDocumentRepository`` per ``DocumentKind``.
    opener:
        Opens saved downloads with the OS handler.
    download_dir:
        Where downloads are written; a per-process temp directory when
        ``None``.
    """

    def __init__(
        self,
        repos: dict[DocumentKind, ProjectDocumentRepository],
        opener: NativeOpenerService,
        session: SessionManager,
        logger: StructuredLogger,
        download_dir: Optional[Path] = None,
    ) -> None:
        super().__init__(logger, session)
        self._repos = repos
        self._opener = opener
        self._download_dir: Optional[Path] = download_dir

    def _repo(self, kind: DocumentKind) -> ProjectDocumentRepository:
        return self._repos[DocumentKind(kind)]

    # -- Requests ----------------------------------------------------------------

    def request_documents(
        self,
        kind: DocumentKind,
        tna_id: str,
        documents: Optional[list[dict[str, Any]]] = None,
        due_date: Optional[str] = None,
    ) -> ServiceResult[ProjectDocuments]:
        result = self._call(
            f"request_documents ({kind})",
            lambda: self._repo(kind).request(tna_id, documents, due_date),
        )
        if result.success:
            self._audit("DOCUMENTS_REQUEST", kind, tna_id, {})
        return result

    def list_requests(self, kind: DocumentKind, status: Optional[str] = None) -> ServiceResult[list[ProjectDocuments]]:
        return self._call(f"list_requests ({kind})", lambda: self._repo(kind).list_all(status))

    def psto_requests(self, kind: DocumentKind, status: Optional[str] = None) -> ServiceResult[list[ProjectDocuments]]:
        return self._call(f"psto_requests ({kind})", lambda: self._repo(kind).for_psto(status))

    def approved_requests(self, kind: DocumentKind) -> ServiceResult[list[ProjectDocuments]]:
        return self._call(f"approved_requests ({kind})", lambda: self._repo(kind).approved())

    def by_tna(self, kind: DocumentKind, tna_id: str) -> ServiceResult[Optional[ProjectDocuments]]:
        return self._call(f"documents_by_tna ({kind})", lambda: self._repo(kind).by_tna(tna_id))

    # -- Submission / review -----------------------------------------------------

    def submit_document(
        self, kind: DocumentKind, tna_id: str, document_type: str, path: Path,
    ) -> ServiceResult[ProjectDocuments]:
        if not document_type:
            return self._invalid("Document type is required.")
        try:
            part = file_part(path)
        except OSError as exc:
            return self._invalid(f"Could not read document: {exc}")
        return self._call(
            f"submit_document ({kind})",
            lambda: self._repo(kind).submit(tna_id, document_type, part),
        )

    def review_document(
        self,
        kind: DocumentKind,
        tna_id: str,
        document_type: str,
        decision: str,
        comments: str = "",
    ) -> ServiceResult[ProjectDocuments]:
        action = _REVIEW_ACTIONS.get(decision)
        if action is None:
            return self._invalid("Decision must be 'approved' or 'rejected'.")
        if decision == ReviewStatus.REJECTED and not comments.strip():
            return self._invalid("Comments are required when rejecting a document.")
        result = self._call(
            f"review_document ({kind})",
            lambda: self._repo(kind).review(tna_id, document_type, action, comments.strip()),
        )
        if result.success:
            self._audit(
                "DOCUMENT_REVIEW", kind, tna_id, {"document_type": document_type, "decision": decision},
            )
        return result

    # -- Viewing -------------------------------------------------------------------

    def download(self, kind: DocumentKind, tna_id: str, document_type: str) -> ServiceResult[DownloadedFile]:
        return self._call(
            f"download_document ({kind})", lambda: self._repo(kind).download(tna_id, document_type),
        )

    def save_download(self, file: DownloadedFile) -> ServiceResult[Path]:
        """Write a downloaded file to the download directory."""
        directory = self._download_dir or Path(tempfile.gettempdir()) / "dost_portal"
        try:
            directory.mkdir(parents=True, exist_ok=True)
            target = directory / safe_filename(file.filename)
            target.write_bytes(file.content)
        except OSError as exc:
            self._logger.error("Could not save %s: %s", file.filename, exc)
            return ServiceResult(success=False, error=f"Could not save file: {exc}", status_code=500)
        self._logger.info("Saved %s (%d bytes).", target, len(file.content))
        return ServiceResult(success=True, data=target)

    def open_document(self, kind: DocumentKind, tna_id: str, document_type: str) -> ServiceResult[Path]:
        """Download, save and open a served document with the OS handler."""
        downloaded = self.download(kind, tna_id, document_type)
        if not downloaded.success or downloaded.data is None:
            return ServiceResult(
                success=False, error=downloaded.error, status_code=downloaded.status_code,
            )
        return self.open_downloaded(downloaded.data)

    def open_downloaded(self, file: DownloadedFile) -> ServiceResult[Path]:
        """Save any served file (reports, application attachments) and open it."""
        saved = self.save_download(file)
        if not saved.success or saved.data is None:
            return saved
        return self._opener.open_file(saved.data)

    def _audit(self, action: str, kind: DocumentKind, tna_id: str, details: dict[str, Any]) -> None:
        user = self._session.current_user if self._session else None
        log_audit_event(
            self._logger,
            action=action,
            entity_type=str(kind),
            entity_id=tna_id,
            user_id=(user.id if user else None) or "unknown",
            details=details,
        )
