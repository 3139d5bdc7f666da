"""
RTEC Meeting Service.

Meeting scheduling and participant management for the Regional
Technology Evaluation Committee.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.enums import MeetingStatus, MeetingType, ParticipantStatus
from portal.models.rtec import Participant, RtecMeeting
from portal.models.service_models import ServiceResult
from portal.repositories.rtec_repository import RtecMeetingRepository
from portal.services.base_service import BaseService
from portal.utils.audit import log_audit_event


class RtecService(BaseService):
    """Service layer for RTEC meetings."""

    def __init__(
        self,
        repo: RtecMeetingRepository,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger, session)
        self._repo = repo

    def create_meeting(
        self,
        tna_id: str,
        meeting_title: str,
        scheduled_date: Union[date, str],
        scheduled_time: str,
        location: str,
        *,
        meeting_type: str = MeetingType.PHYSICAL,
        virtual_meeting_link: Optional[str] = None,
        meeting_description: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult[RtecMeeting]:
        if not meeting_title.strip():
            return self._invalid("Meeting title is required.")
        if not scheduled_date or not scheduled_time.strip() or not location.strip():
            return self._invalid("Date, time and location are required.")
        if meeting_type not in {m.value for m in MeetingType}:
            return self._invalid(f"Unknown meeting type '{meeting_type}'.")
        if meeting_type != MeetingType.PHYSICAL and not (virtual_meeting_link or "").strip():
            return self._invalid("A meeting link is required for virtual and hybrid meetings.")
        payload: dict[str, Any] = {
            "tna_id": tna_id,
            "meeting_title": meeting_title.strip(),
            "meeting_description": meeting_description,
            "scheduled_date": scheduled_date,
            "scheduled_time": scheduled_time.strip(),
            "location": location.strip(),
            "meeting_type": meeting_type,
            "virtual_meeting_link": virtual_meeting_link,
            "notes": notes,
        }
        return self._call("create_meeting", lambda: self._repo.create(payload))

    def list_meetings(self, status: Optional[str] = None, page: int = 1, limit: int = 10) -> ServiceResult[list[RtecMeeting]]:
        return self._call("list_meetings", lambda: self._repo.list_all(status, page, limit))

    def my_meetings(self, status: Optional[str] = None) -> ServiceResult[list[RtecMeeting]]:
        return self._call("my_meetings", lambda: self._repo.my_meetings(status))

    def get_meeting(self, meeting_id: str) -> ServiceResult[RtecMeeting]:
        result = self._call("get_meeting", lambda: self._repo.get_by_id(meeting_id))
        if result.success and result.data is None:
            return ServiceResult(success=False, error="Meeting not found.", status_code=404)
        return result

    def update_meeting(self, meeting_id: str, changes: dict[str, Any]) -> ServiceResult[RtecMeeting]:
        return self._call("update_meeting", lambda: self._repo.update(meeting_id, changes))

    def update_status(self, meeting_id: str, status: str) -> ServiceResult[RtecMeeting]:
        if status not in {s.value for s in MeetingStatus}:
            return self._invalid(f"Unknown meeting status '{status}'.")
        result = self._call("update_meeting_status", lambda: self._repo.update_status(meeting_id, status))
        if result.success:
            self._audit("MEETING_STATUS", meeting_id, {"status": status})
        return result

    def cancel_meeting(self, meeting_id: str) -> ServiceResult[RtecMeeting]:
        result = self._call("cancel_meeting", lambda: self._repo.cancel(meeting_id))
        if result.success:
            self._audit("MEETING_CANCEL", meeting_id, {})
        return result

    def reschedule_meeting(
        self, meeting_id: str, scheduled_date: Union[date, str], scheduled_time: str,
    ) -> ServiceResult[RtecMeeting]:
        if not scheduled_date or not scheduled_time.strip():
            return self._invalid("New date and time are required.")
        new_date = scheduled_date.isoformat() if isinstance(scheduled_date, date) else scheduled_date
        return self._call(
            "reschedule_meeting",
            lambda: self._repo.reschedule(meeting_id, new_date, scheduled_time.strip()),
        )

    def delete_meeting(self, meeting_id: str) -> ServiceResult[None]:
        return self._call("delete_meeting", lambda: self._repo.delete(meeting_id))

    # -- Participants ------------------------------------------------------------

    def participants(self, meeting_id: str) -> ServiceResult[list[Participant]]:
        return self._call("participants", lambda: self._repo.participants(meeting_id))

    def add_participant(self, meeting_id: str, user_id: str, role: str = "member") -> ServiceResult[RtecMeeting]:
        return self._call("add_participant", lambda: self._repo.add_participant(meeting_id, user_id, role))

    def remove_participant(self, meeting_id: str, participant_id: str) -> ServiceResult[None]:
        return self._call("remove_participant", lambda: self._repo.remove_participant(meeting_id, participant_id))

    def respond_to_invitation(self, meeting_id: str, accept: bool) -> ServiceResult[RtecMeeting]:
        status = ParticipantStatus.CONFIRMED if accept else ParticipantStatus.DECLINED
        return self._call("respond_to_invitation", lambda: self._repo.respond(meeting_id, status))

    def invite_proponent(self, meeting_id: str) -> ServiceResult[Optional[str]]:
        return self._call("invite_proponent", lambda: self._repo.invite_proponent(meeting_id))

    def invite_psto(self, meeting_id: str, psto_id: str) -> ServiceResult[Optional[str]]:
        return self._call("invite_psto", lambda: self._repo.invite_psto(meeting_id, psto_id))

    def _audit(self, action: str, meeting_id: str, details: dict[str, Any]) -> None:
        user = self._session.current_user if self._session else None
        log_audit_event(
            self._logger,
            action=action,
            entity_type="RTECMeeting",
            entity_id=meeting_id,
            user_id=(user.id if user else None) or "unknown",
            details=details,
        )
