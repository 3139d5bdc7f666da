"""
RTEC Meeting Models.

Regional Technology Evaluation Committee meetings: scheduled by
DOST-MIMAROPA for TNAs whose documents were approved.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from portal.models.base import PortalDocument
from portal.models.enums import MeetingStatus, MeetingType, ParticipantStatus


class Participant(BaseModel):
    """One invited participant of an RTEC meeting."""

    model_config = ConfigDict(extra="ignore")

    user_id: Optional[Any] = None
    name: str = ""
    email: str = ""
    role: str = "member"
    status: str = ParticipantStatus.INVITED
    invited_at: Optional[datetime] = None


class RtecMeeting(PortalDocument):
    """RTEC meeting document."""

    meeting_id: Optional[str] = None
    tna_id: Optional[Any] = None
    application_id: Optional[Any] = None
    meeting_title: str = ""
    meeting_description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    scheduled_time: Optional[str] = None
    location: Optional[str] = None
    meeting_type: str = MeetingType.PHYSICAL
    virtual_meeting_link: Optional[str] = None
    status: str = MeetingStatus.SCHEDULED
    participants: list[Participant] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def confirmed_count(self) -> int:
        return sum(1 for p in self.participants if p.status == ParticipantStatus.CONFIRMED)
