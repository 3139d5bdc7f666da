from __future__ import annotations

"""
Data Models Package.

Re-exports the Pydantic models for short imports::

    from portal.models import Enrollment, ProgramApplication, Notification
    from portal.models import BadgeVariant, StageState
"""

from portal.models.application import ProgramApplication
from portal.models.document import DocumentItem, DownloadedFile, ProjectDocuments
from portal.models.enrollment import Enrollment, ServiceOption, ServiceStage, StageRecord
from portal.models.enums import (
    BadgeColor,
    BadgeVariant,
    EnrollmentStatus,
    ProgramCode,
    ReviewStatus,
    StageId,
    StageState,
    UserRole,
)
from portal.models.notification import Notification, NotificationFeed
from portal.models.rtec import Participant, RtecMeeting
from portal.models.status_models import StageView, StatusBadge, StatusView
from portal.models.tna import TnaRecord
from portal.models.user import User

__all__ = [
    "BadgeColor",
    "BadgeVariant",
    "DocumentItem",
    "DownloadedFile",
    "Enrollment",
    "EnrollmentStatus",
    "Notification",
    "NotificationFeed",
    "Participant",
    "ProgramApplication",
    "ProgramCode",
    "ProjectDocuments",
    "ReviewStatus",
    "RtecMeeting",
    "ServiceOption",
    "ServiceStage",
    "StageId",
    "StageRecord",
    "StageState",
    "StageView",
    "StatusBadge",
    "StatusView",
    "TnaRecord",
    "User",
]
