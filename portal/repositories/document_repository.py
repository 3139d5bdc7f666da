"""
Project Document Repository.

RTEC, funding and refund document requests share one endpoint shape,
parameterised by :class:`~portal.models.enums.DocumentKind`
(``/api/rtec-documents``, ``/api/funding-documents``,
``/api/refund-documents``).
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from portal.api_client import PortalApiClient
from portal.logger import StructuredLogger
from portal.models.document import DownloadedFile, ProjectDocuments
from portal.models.enums import DocumentKind
from portal.repositories.base_repository import BaseRepository, FilePart

# The RTEC endpoint serves files under ``serve``; the others under ``file``.
_FILE_SEGMENT: dict[str, str] = {
    DocumentKind.RTEC: "serve",
    DocumentKind.FUNDING: "file",
    DocumentKind.REFUND: "file",
}


class ProjectDocumentRepository(BaseRepository):
    """Data access for one document-request family."""

    def __init__(
        self,
        api: PortalApiClient,
        logger: StructuredLogger,
        kind: DocumentKind,
    ) -> None:
        super().__init__(api, logger)
        self.kind: DocumentKind = kind
        self.RESOURCE = str(kind)

    def request(
        self,
        tna_id: str,
        documents: Optional[list[dict[str, Any]]] = None,
        due_date: Optional[str] = None,
    ) -> Optional[ProjectDocuments]:
        """Ask the proponent for the document set tied to *tna_id*."""
        body = self._outbound({"documents": documents, "due_date": due_date})
        envelope = self._api.post(self._path("request", tna_id), json=body)
        return self._one(envelope, ProjectDocuments, "data")

    def list_all(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> list[ProjectDocuments]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return self._many(self._api.get(self._path("list"), params=params), ProjectDocuments, "data")

    def for_psto(self, status: Optional[str] = None) -> list[ProjectDocuments]:
        envelope = self._api.get(self._path("psto", "list"), params={"status": status} if status else None)
        return self._many(envelope, ProjectDocuments, "data")

    def approved(self) -> list[ProjectDocuments]:
        return self._many(self._api.get(self._path("approved")), ProjectDocuments, "data")

    def by_tna(self, tna_id: str) -> Optional[ProjectDocuments]:
        return self._one(self._api.get(self._path("tna", tna_id)), ProjectDocuments, "data")

    def get_by_id(self, request_id: str) -> Optional[ProjectDocuments]:
        return self._one(self._api.get(self._path(request_id)), ProjectDocuments, "data")

    def submit(self, tna_id: str, document_type: str, document: FilePart) -> Optional[ProjectDocuments]:
        envelope = self._api.post(
            self._path("submit", tna_id),
            data={"documentType": document_type},
            files={"document": document},
        )
        return self._one(envelope, ProjectDocuments, "data")

    def review(
        self, tna_id: str, document_type: str, action: str, comments: str = "",
    ) -> Optional[ProjectDocuments]:
        """Approve or reject one submitted document (``action``: ``approve|reject``)."""
        envelope = self._api.post(
            self._path("review", tna_id),
            json={"documentType": document_type, "action": action, "comments": comments},
        )
        return self._one(envelope, ProjectDocuments, "data")

    def download(self, tna_id: str, document_type: str) -> DownloadedFile:
        segment = _FILE_SEGMENT.get(self.kind, "file")
        return self._api.download(
            self._path(segment, tna_id, quote(document_type, safe="")),
            fallback_name=document_type,
        )
