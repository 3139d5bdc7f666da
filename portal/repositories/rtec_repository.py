"""
RTEC Meeting Repository.

Data access for ``/api/rtec-meetings``: meeting CRUD, status changes,
participants and invitations.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.models.enums import MeetingStatus
from portal.models.envelope import ApiEnvelope
from portal.models.rtec import Participant, RtecMeeting
from portal.repositories.base_repository import BaseRepository
from portal.utils.string_helpers import normalize_keys


class RtecMeetingRepository(BaseRepository):
    """Data access layer for RTEC meetings."""

    RESOURCE = "rtec-meetings"

    def _meeting(self, envelope: ApiEnvelope) -> Optional[RtecMeeting]:
        # Single-meeting responses put the document under ``data`` or
        # ``data.meeting`` depending on the endpoint.
        raw = envelope.payload("data") or envelope.payload("meeting")
        if isinstance(raw, dict) and isinstance(raw.get("meeting"), dict):
            raw = raw["meeting"]
        if not isinstance(raw, dict):
            return None
        return RtecMeeting.model_validate(normalize_keys(raw))

    def create(self, payload: dict[str, Any]) -> Optional[RtecMeeting]:
        return self._meeting(self._api.post(self._path("create"), json=self._outbound(payload)))

    def list_all(
        self, status: Optional[str] = None, page: int = 1, limit: int = 10,
    ) -> list[RtecMeeting]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return self._many(self._api.get(self._path("list"), params=params), RtecMeeting, "data")

    def get_by_id(self, meeting_id: str) -> Optional[RtecMeeting]:
        return self._meeting(self._api.get(self._path(meeting_id)))

    def update(self, meeting_id: str, changes: dict[str, Any]) -> Optional[RtecMeeting]:
        return self._meeting(self._api.put(self._path(meeting_id), json=self._outbound(changes)))

    def update_status(self, meeting_id: str, status: str) -> Optional[RtecMeeting]:
        return self._meeting(self._api.patch(self._path(meeting_id, "status"), json={"status": status}))

    def cancel(self, meeting_id: str) -> Optional[RtecMeeting]:
        return self.update_status(meeting_id, MeetingStatus.CANCELLED)

    def reschedule(
        self, meeting_id: str, scheduled_date: str, scheduled_time: str,
    ) -> Optional[RtecMeeting]:
        return self.update(
            meeting_id,
            {
                "scheduled_date": scheduled_date,
                "scheduled_time": scheduled_time,
                "status": MeetingStatus.SCHEDULED,
            },
        )

    def delete(self, meeting_id: str) -> None:
        self._api.delete(self._path(meeting_id))

    # -- Participants ----------------------------------------------------------

    def participants(self, meeting_id: str) -> list[Participant]:
        return self._many(self._api.get(self._path(meeting_id, "participants")), Participant, "data")

    def add_participant(self, meeting_id: str, user_id: str, role: str = "member") -> Optional[RtecMeeting]:
        envelope = self._api.post(
            self._path(meeting_id, "participants"), json={"userId": user_id, "role": role},
        )
        return self._meeting(envelope)

    def remove_participant(self, meeting_id: str, participant_id: str) -> None:
        self._api.delete(self._path(meeting_id, "participants", participant_id))

    def respond(self, meeting_id: str, status: str) -> Optional[RtecMeeting]:
        """Confirm or decline the current user's own invitation."""
        envelope = self._api.patch(
            self._path(meeting_id, "participants", "me"), json={"status": status},
        )
        return self._meeting(envelope)

    def invite_proponent(self, meeting_id: str) -> Optional[str]:
        return self._api.post(self._path(meeting_id, "invite-proponent")).message

    def invite_psto(self, meeting_id: str, psto_id: str) -> Optional[str]:
        return self._api.post(self._path(meeting_id, "invite-psto"), json={"pstoId": psto_id}).message

    def my_meetings(self, status: Optional[str] = None) -> list[RtecMeeting]:
        envelope = self._api.get(
            self._path("user", "my-meetings"), params={"status": status} if status else None,
        )
        return self._many(envelope, RtecMeeting, "data")
