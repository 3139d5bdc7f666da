"""
Program Application Repository.

Every program (SETUP, GIA, CEST, SSCP) exposes the same endpoint family
under ``/api/programs/<code>``; the PSTO review queue lives under
``/api/programs/psto/applications``.  Edit, document upload and
resubmission exist for SETUP only.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.models.application import ProgramApplication
from portal.models.document import DownloadedFile
from portal.models.enums import ProgramCode
from portal.repositories.base_repository import BaseRepository, FilePart


class ApplicationRepository(BaseRepository):
    """Data access layer for program applications."""

    RESOURCE = "programs"

    def _program(self, program: str, *parts: object) -> str:
        return self._path(str(program).lower(), *parts)

    # -- Proponent side --------------------------------------------------------

    def submit(
        self,
        program: str,
        fields: dict[str, Any],
        files: Optional[dict[str, FilePart]] = None,
    ) -> Optional[ProgramApplication]:
        """Submit a new application as multipart form data."""
        data = {k: str(v) for k, v in self._outbound(fields).items()}
        envelope = self._api.post(self._program(program, "submit"), data=data, files=files or None)
        return self._one(envelope, ProgramApplication, "data")

    def my_applications(self, program: str) -> list[ProgramApplication]:
        envelope = self._api.get(self._program(program, "my-applications"))
        return self._many(envelope, ProgramApplication, "data")

    def get_by_id(self, program: str, application_id: str) -> Optional[ProgramApplication]:
        envelope = self._api.get(self._program(program, application_id))
        return self._one(envelope, ProgramApplication, "data")

    def update(self, application_id: str, changes: dict[str, Any]) -> Optional[ProgramApplication]:
        envelope = self._api.put(
            self._program(ProgramCode.SETUP, application_id), json=self._outbound(changes),
        )
        return self._one(envelope, ProgramApplication, "data")

    def update_status(
        self,
        program: str,
        application_id: str,
        status: str,
        comments: str = "",
    ) -> Optional[ProgramApplication]:
        envelope = self._api.put(
            self._program(program, application_id, "status"),
            json={"status": status, "comments": comments},
        )
        return self._one(envelope, ProgramApplication, "data")

    def upload_documents(
        self, application_id: str, files: dict[str, FilePart],
    ) -> Optional[ProgramApplication]:
        envelope = self._api.post(
            self._program(ProgramCode.SETUP, application_id, "documents"), files=files,
        )
        return self._one(envelope, ProgramApplication, "data")

    def resubmit(self, application_id: str) -> Optional[ProgramApplication]:
        envelope = self._api.post(self._program(ProgramCode.SETUP, application_id, "resubmit"))
        return self._one(envelope, ProgramApplication, "data")

    def stats(self, program: str) -> dict[str, Any]:
        envelope = self._api.get(self._program(program, "stats", "overview"))
        return self._raw(envelope, "data") or {}

    def download_file(self, program: str, application_id: str, file_type: str) -> DownloadedFile:
        return self._api.download(
            self._program(program, application_id, "download", file_type),
            fallback_name=file_type,
        )

    # -- PSTO review queue -----------------------------------------------------

    def psto_applications(self, status: Optional[str] = None) -> list[ProgramApplication]:
        envelope = self._api.get(
            self._path("psto", "applications"), params={"status": status} if status else None,
        )
        return self._many(envelope, ProgramApplication, "data")

    def psto_get(self, application_id: str) -> Optional[ProgramApplication]:
        envelope = self._api.get(self._path("psto", "applications", application_id))
        return self._one(envelope, ProgramApplication, "data")

    def psto_review(
        self, application_id: str, status: str, comments: str = "",
    ) -> Optional[ProgramApplication]:
        envelope = self._api.put(
            self._path("psto", "applications", application_id, "review"),
            json={"status": status, "comments": comments},
        )
        return self._one(envelope, ProgramApplication, "data")

    def psto_download_file(self, application_id: str, file_type: str) -> DownloadedFile:
        return self._api.download(
            self._path("psto", "applications", application_id, "download", file_type),
            fallback_name=file_type,
        )
