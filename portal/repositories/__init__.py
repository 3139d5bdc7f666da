"""
Repository Layer Package.

Provides data-access abstractions over the portal REST API.
All HTTP calls flow through repositories; services never touch the
``PortalApiClient`` directly.

Usage:
    from portal.repositories.enrollment_repository import EnrollmentRepository
    from portal.repositories.user_repository import UserRepository
"""

from portal.repositories.base_repository import BaseRepository
from portal.repositories.application_repository import ApplicationRepository
from portal.repositories.auth_repository import AuthRepository
from portal.repositories.document_repository import ProjectDocumentRepository
from portal.repositories.enrollment_repository import EnrollmentRepository
from portal.repositories.notification_repository import NotificationRepository
from portal.repositories.rtec_repository import RtecMeetingRepository
from portal.repositories.tna_repository import TnaRepository
from portal.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ApplicationRepository",
    "AuthRepository",
    "EnrollmentRepository",
    "NotificationRepository",
    "ProjectDocumentRepository",
    "RtecMeetingRepository",
    "TnaRepository",
    "UserRepository",
]
