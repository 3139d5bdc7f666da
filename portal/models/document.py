"""
Project Document Models.

RTEC, funding and refund document requests share one shape: a request
tied to a TNA, a status, and a list of uploaded items.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from portal.models.base import PortalDocument
from portal.models.enums import DocumentRequestStatus


class DocumentItem(BaseModel):
    """A single requested or uploaded document."""

    model_config = ConfigDict(extra="ignore")

    type: str = ""
    name: str = ""
    description: Optional[str] = None
    status: str = "pending"
    filename: Optional[str] = None
    original_name: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    remarks: Optional[str] = None


class ProjectDocuments(PortalDocument):
    """A document request (``rtec-documents`` / ``funding-documents`` / ``refund-documents``)."""

    tna_id: Optional[Any] = None
    application_id: Optional[Any] = None
    proponent_id: Optional[Any] = None
    status: str = DocumentRequestStatus.DOCUMENTS_REQUESTED
    documents: list[DocumentItem] = Field(default_factory=list)
    requested_at: Optional[datetime] = None
    due_date: Optional[datetime] = None

    @property
    def pending_items(self) -> list[DocumentItem]:
        """Items not yet uploaded."""
        return [d for d in self.documents if not d.filename]


class DownloadedFile(BaseModel):
    """Binary payload returned by a download endpoint."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
