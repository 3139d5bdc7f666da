"""
Technology Needs Assessment Model.

A TNA is scheduled by the PSTO once an application passes PSTO review,
conducted on site, and its report forwarded to DOST-MIMAROPA.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from portal.models.base import PortalDocument
from portal.models.enums import TnaStatus


class TnaRecord(PortalDocument):
    """TNA schedule and report state."""

    tna_id: Optional[str] = None
    application_id: Optional[Any] = None
    proponent_id: Optional[Any] = None
    program_name: Optional[str] = None
    status: str = TnaStatus.SCHEDULED
    scheduled_date: Optional[datetime] = None
    scheduled_time: Optional[str] = None
    location: Optional[str] = None
    assessors: list[Any] = Field(default_factory=list)
    notes: Optional[str] = None
    tna_report: Optional[dict[str, Any]] = None
    dost_mimaropa_status: Optional[str] = None
    dost_mimaropa_comments: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def has_report(self) -> bool:
        return bool(self.tna_report)
