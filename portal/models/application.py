"""
Program Application Model.

Applications submitted to SETUP, GIA, CEST or SSCP.  The document
carries two status dimensions: the overall ``status`` and the PSTO's
``psto_status`` review decision.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from portal.models.base import PortalDocument
from portal.models.enums import EnrollmentStatus


class ProgramApplication(PortalDocument):
    """Represents one submitted program application."""

    application_id: Optional[str] = None
    program_code: Optional[str] = None
    program_name: Optional[str] = None
    enterprise_name: Optional[str] = None
    proponent_id: Optional[Any] = None
    province: Optional[str] = None
    status: str = EnrollmentStatus.PENDING
    psto_status: Optional[str] = None
    tna_status: Optional[str] = None
    current_stage: Optional[str] = None
    psto_comments: Optional[str] = None
    forwarded_to_psto: bool = False
    forwarded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    files: dict[str, Any] = Field(default_factory=dict)

    @property
    def display_id(self) -> str:
        return self.application_id or self.id or "-"
