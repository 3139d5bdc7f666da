"""
Enrollment Models.

An enrollment tracks one proponent's progress through a program's
fixed stage list (TNA -> RTEC -> funding -> training -> consultancy ->
liquidation).  Stage progress arrives in two shapes: the ``stages``
array owned by the enrollment document, and the ``stageData`` flags
the status views read.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from portal.models.base import PortalDocument
from portal.models.enums import EnrollmentStatus, ReviewStatus


class ServiceStage(BaseModel):
    """One entry of a program's stage list."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    required: bool = True
    completed: bool = False
    completed_date: Optional[datetime] = None
    notes: str = ""


class StageRecord(BaseModel):
    """Per-stage completion flags (``stageData`` entry).

    Nothing guarantees that at most one record is ``in_progress``; see
    :func:`portal.services.status_resolver.find_stage_conflicts`.
    """

    model_config = ConfigDict(extra="ignore")

    stage_id: str
    completed: bool = False
    in_progress: bool = False


class Enrollment(PortalDocument):
    """Enrollment document as served by ``/api/enrollments``."""

    enrollment_id: Optional[str] = None
    service: Optional[str] = None
    status: str = EnrollmentStatus.DRAFT
    tna_status: Optional[str] = ReviewStatus.PENDING
    province: Optional[str] = None
    current_stage: Optional[str] = None
    stages: list[ServiceStage] = Field(default_factory=list)
    stage_data: list[StageRecord] = Field(default_factory=list)
    customer: dict[str, Any] = Field(default_factory=dict)
    service_data: dict[str, Any] = Field(default_factory=dict)
    notes: str = ""
    review_notes: str = ""
    enrolled_date: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    completed_date: Optional[datetime] = None

    @property
    def customer_name(self) -> str:
        """Best-effort display name for the enrolled customer."""
        for key in ("enterprise_name", "business_name", "name"):
            value = self.customer.get(key)
            if value:
                return str(value)
        first = self.customer.get("first_name") or ""
        last = self.customer.get("last_name") or ""
        return f"{first} {last}".strip() or (self.enrollment_id or "")


class ServiceOption(BaseModel):
    """A program's description and default stage list."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    description: str = ""
    stages: list[ServiceStage] = Field(default_factory=list)
