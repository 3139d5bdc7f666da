"""
TNA Repository.

Technology Needs Assessment lifecycle under ``/api/tna``: scheduling by
the PSTO, on-site progress, report upload, forwarding to DOST-MIMAROPA
and the regional review.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.models.document import DownloadedFile
from portal.models.tna import TnaRecord
from portal.repositories.base_repository import BaseRepository, FilePart


class TnaRepository(BaseRepository):
    """Data access layer for TNA records."""

    RESOURCE = "tna"

    def schedule(self, payload: dict[str, Any]) -> Optional[TnaRecord]:
        envelope = self._api.post(self._path("schedule"), json=self._outbound(payload))
        return self._one(envelope, TnaRecord, "tna") or self._one(envelope, TnaRecord, "data")

    def list_all(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> list[TnaRecord]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        envelope = self._api.get(self._path("list"), params=params)
        return self._many(envelope, TnaRecord, "data")

    def mark_in_progress(self, tna_id: str) -> Optional[TnaRecord]:
        return self._one(self._api.put(self._path(tna_id, "mark-in-progress")), TnaRecord, "tna")

    def mark_completed(self, tna_id: str) -> Optional[TnaRecord]:
        return self._one(self._api.put(self._path(tna_id, "mark-completed")), TnaRecord, "tna")

    def upload_report(self, tna_id: str, report: FilePart) -> dict[str, Any]:
        envelope = self._api.post(
            self._path("upload-report"), data={"tnaId": tna_id}, files={"reportFile": report},
        )
        return self._raw(envelope, "report") or {}

    def download_report(self, tna_id: str) -> DownloadedFile:
        return self._api.download(self._path(tna_id, "download-report"), fallback_name="tna-report")

    def forward_to_dost(self, tna_id: str) -> Optional[TnaRecord]:
        envelope = self._api.post(self._path(tna_id, "forward-to-dost-mimaropa"))
        return self._one(envelope, TnaRecord, "tna")

    def reports_for_dost(self) -> list[TnaRecord]:
        return self._many(self._api.get(self._path("dost-mimaropa", "reports")), TnaRecord, "data")

    def review_report(self, tna_id: str, status: str, comments: str = "") -> Optional[TnaRecord]:
        envelope = self._api.patch(
            self._path(tna_id, "dost-mimaropa", "review"),
            json={"status": status, "comments": comments},
        )
        return self._one(envelope, TnaRecord, "tna")

    def approved(self) -> list[TnaRecord]:
        return self._many(self._api.get(self._path("dost-mimaropa", "approved")), TnaRecord, "data")

    def upload_signed_report(self, tna_id: str, report: FilePart) -> dict[str, Any]:
        envelope = self._api.post(
            self._path(tna_id, "upload-signed-report"), files={"signedTnaReport": report},
        )
        return self._raw(envelope) or {}

    def download_signed_report(self, tna_id: str) -> DownloadedFile:
        return self._api.download(
            self._path(tna_id, "download-signed-report"), fallback_name="signed-tna-report",
        )
