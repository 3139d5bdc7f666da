"""
Shared Enumerations for Portal Models.

String enumerations for the tags the backend emits.  StrEnum values
compare equal to their string equivalents, so ``status == "approved"``
and ``status == EnrollmentStatus.APPROVED`` are interchangeable.

Model fields holding server-owned status tags are typed ``str``, not the
enum: the backend does not enforce a shared vocabulary and unknown tags
must survive parsing so the status resolver can fall back on them.
"""

from __future__ import annotations
from enum import StrEnum


class UserRole(StrEnum):
    """Portal roles as stored on the ``User`` document."""

    PROPONENT = "proponent"
    PSTO = "psto"
    DOST_MIMAROPA = "dost_mimaropa"
    SUPER_ADMIN = "super_admin"


class ProgramCode(StrEnum):
    """DOST assistance programs.  Opaque tags as far as the client cares."""

    SETUP = "SETUP"
    GIA = "GIA"
    CEST = "CEST"
    SSCP = "SSCP"


class Province(StrEnum):
    """Provinces served by the regional PSTOs."""

    MARINDUQUE = "Marinduque"
    OCCIDENTAL_MINDORO = "Occidental Mindoro"
    ORIENTAL_MINDORO = "Oriental Mindoro"
    ROMBLON = "Romblon"
    PALAWAN = "Palawan"
    MIMAROPA = "MIMAROPA"


class EnrollmentStatus(StrEnum):
    """Primary ``status`` tags for enrollments and applications.

    Program-specific extensions (``psto_approved``, ``tna_scheduled`` ...)
    are listed too; the set is not closed on the server side.
    """

    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PENDING = "pending"
    RETURNED = "returned"
    PSTO_APPROVED = "psto_approved"
    PSTO_REJECTED = "psto_rejected"
    TNA_SCHEDULED = "tna_scheduled"
    TNA_CONDUCTED = "tna_conducted"
    TNA_REPORT_SUBMITTED = "tna_report_submitted"
    DOST_MIMAROPA_APPROVED = "dost_mimaropa_approved"
    DOST_MIMAROPA_REJECTED = "dost_mimaropa_rejected"


class ReviewStatus(StrEnum):
    """Secondary review dimensions: ``tnaStatus`` and ``pstoStatus``."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    RETURNED = "returned"


class TnaStatus(StrEnum):
    """Lifecycle of a scheduled Technology Needs Assessment."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REPORT_UPLOADED = "report_uploaded"
    SUBMITTED_TO_DOST = "submitted_to_dost"
    CANCELLED = "cancelled"


class BadgeVariant(StrEnum):
    """Semantic badge categories produced by the status resolver."""

    SECONDARY = "secondary"
    WARNING = "warning"
    SUCCESS = "success"
    DANGER = "danger"
    INFO = "info"


class BadgeColor(StrEnum):
    """Palette keys used by the shared status badge table."""

    GRAY = "gray"
    YELLOW = "yellow"
    BLUE = "blue"
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
    PURPLE = "purple"


class StageState(StrEnum):
    """Per-stage display state derived from ``stageData``."""

    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"


class StageId(StrEnum):
    """Stage identifiers shared by every program's stage list."""

    TNA = "tna"
    RTEC = "rtec"
    FUNDING = "funding"
    TRAINING = "training"
    CONSULTANCY = "consultancy"
    LIQUIDATION = "liquidation"


class MeetingStatus(StrEnum):
    """RTEC meeting lifecycle."""

    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


class MeetingType(StrEnum):
    PHYSICAL = "physical"
    VIRTUAL = "virtual"
    HYBRID = "hybrid"


class ParticipantStatus(StrEnum):
    INVITED = "invited"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    ATTENDED = "attended"
    ABSENT = "absent"


class DocumentRequestStatus(StrEnum):
    """Status of an RTEC / funding / refund document request."""

    DOCUMENTS_REQUESTED = "documents_requested"
    DOCUMENTS_SUBMITTED = "documents_submitted"
    DOCUMENTS_UNDER_REVIEW = "documents_under_review"
    DOCUMENTS_APPROVED = "documents_approved"
    DOCUMENTS_REJECTED = "documents_rejected"
    RTEC_COMPLETED = "rtec_completed"
    ADDITIONAL_DOCUMENTS_REQUIRED = "additional_documents_required"


class DocumentKind(StrEnum):
    """The three document-request families served by the backend.

    Values are the REST path segments (``/api/<value>``).
    """

    RTEC = "rtec-documents"
    FUNDING = "funding-documents"
    REFUND = "refund-documents"


class RecipientType(StrEnum):
    PROPONENT = "proponent"
    PSTO = "psto"
    DOST_MIMAROPA = "dost_mimaropa"
    SUPER_ADMIN = "super_admin"


class NotificationPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
