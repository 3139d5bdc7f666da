"""
Enrollment Repository.

Data access for ``/api/enrollments``: the enrollment list and detail,
stage progress updates, and the TNA submission/review handshake.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.models.enrollment import Enrollment, ServiceOption
from portal.repositories.base_repository import BaseRepository, FilePart
from portal.utils.string_helpers import normalize_keys

# Multipart field names accepted by ``POST /enrollments/:id/submit-tna``.
TNA_FILE_FIELDS: tuple[str, ...] = ("letterOfIntent", "dostTnaForm", "enterpriseProfile")


class EnrollmentRepository(BaseRepository):
    """Data access layer for Enrollment documents."""

    RESOURCE = "enrollments"

    def list_all(
        self,
        *,
        province: Optional[str] = None,
        status: Optional[str] = None,
        service: Optional[str] = None,
    ) -> list[Enrollment]:
        """List enrollments, newest first, optionally filtered server-side."""
        params = {k: v for k, v in {"province": province, "status": status, "service": service}.items() if v}
        envelope = self._api.get(self._path(), params=params or None)
        return self._many(envelope, Enrollment, "enrollments")

    def get_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        return self._one(self._api.get(self._path(enrollment_id)), Enrollment, "enrollment")

    def stats(self, province: Optional[str] = None) -> dict[str, Any]:
        envelope = self._api.get(self._path("stats"), params={"province": province} if province else None)
        return self._raw(envelope, "stats") or {}

    def service_options(self) -> dict[str, ServiceOption]:
        """Program name → description and default stage list."""
        raw = self._api.get(self._path("service-options")).payload("serviceOptions") or {}
        return {name: ServiceOption.model_validate(normalize_keys(option)) for name, option in raw.items()}

    def create(self, payload: dict[str, Any]) -> Optional[Enrollment]:
        envelope = self._api.post(self._path("create"), json=self._outbound(payload))
        return self._one(envelope, Enrollment, "enrollment")

    def update(self, enrollment_id: str, changes: dict[str, Any]) -> Optional[Enrollment]:
        envelope = self._api.put(self._path(enrollment_id), json=self._outbound(changes))
        return self._one(envelope, Enrollment, "enrollment")

    def update_stage(
        self,
        enrollment_id: str,
        stage_id: str,
        completed: bool,
        notes: str = "",
    ) -> Optional[Enrollment]:
        envelope = self._api.patch(
            self._path(enrollment_id, "stage"),
            json={"stageId": stage_id, "completed": completed, "notes": notes},
        )
        return self._one(envelope, Enrollment, "enrollment")

    def delete(self, enrollment_id: str) -> None:
        self._api.delete(self._path(enrollment_id))

    def submit_tna(
        self,
        enrollment_id: str,
        tna_info: dict[str, Any],
        files: dict[str, FilePart],
    ) -> Optional[Enrollment]:
        """Submit the TNA form with its attachments.

        ``tna_info`` travels as bracketed form fields
        (``tnaInfo[contactPerson]``) so the server parses it back into
        an object alongside the multipart files.
        """
        data = {
            f"tnaInfo[{key}]": str(value)
            for key, value in self._outbound(tna_info).items()
        }
        parts = {name: part for name, part in files.items() if name in TNA_FILE_FIELDS}
        envelope = self._api.post(
            self._path(enrollment_id, "submit-tna"), data=data, files=parts or None,
        )
        return self._one(envelope, Enrollment, "enrollment")

    def review_tna(
        self,
        enrollment_id: str,
        action: str,
        review_notes: str = "",
        reviewed_by: Optional[str] = None,
    ) -> Optional[Enrollment]:
        """Record an ``approve`` / ``reject`` decision on a submitted TNA."""
        body = self._outbound(
            {"action": action, "review_notes": review_notes, "reviewed_by": reviewed_by}
        )
        envelope = self._api.post(self._path(enrollment_id, "review-tna"), json=body)
        return self._one(envelope, Enrollment, "enrollment")

    def tna_for_review(self, status: Optional[str] = None) -> list[Enrollment]:
        envelope = self._api.get(
            self._path("tna", "for-review"), params={"status": status} if status else None,
        )
        return self._many(envelope, Enrollment, "enrollments")
