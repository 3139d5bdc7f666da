"""
Business Logic Services Package.

Services depend on the Repository layer for data access and the
Auth module for user context.

The ``create_services()`` factory wires the API client, every repository
and every service together, returning a typed dict that the UI layer can
consume without knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import Optional, TypedDict

import requests

from portal.api_client import PortalApiClient
from portal.auth import SessionManager
from portal.config import AppConfig
from portal.logger import StructuredLogger, get_logger
from portal.models.enums import DocumentKind
from portal.repositories.application_repository import ApplicationRepository
from portal.repositories.auth_repository import AuthRepository
from portal.repositories.document_repository import ProjectDocumentRepository
from portal.repositories.enrollment_repository import EnrollmentRepository
from portal.repositories.notification_repository import NotificationRepository
from portal.repositories.rtec_repository import RtecMeetingRepository
from portal.repositories.tna_repository import TnaRepository
from portal.repositories.user_repository import UserRepository
from portal.services.application_service import ApplicationService
from portal.services.auth_service import AuthService
from portal.services.document_service import DocumentService
from portal.services.enrollment_service import EnrollmentService
from portal.services.native_opener import NativeOpenerService
from portal.services.notification_service import NotificationService
from portal.services.rtec_service import RtecService
from portal.services.tna_service import TnaService
from portal.services.users import UserService
from portal.token_store import TokenStore


class ServiceContainer(TypedDict):
    """Typed container for all application services."""

    api_client: PortalApiClient
    token_store: TokenStore
    auth_service: AuthService
    user_service: UserService
    enrollment_service: EnrollmentService
    application_service: ApplicationService
    tna_service: TnaService
    rtec_service: RtecService
    document_service: DocumentService
    notification_service: NotificationService
    native_opener_service: NativeOpenerService


def create_services(
    config: AppConfig,
    session: SessionManager,
    *,
    http_session: Optional[requests.Session] = None,
    token_store: Optional[TokenStore] = None,
    logger: Optional[StructuredLogger] = None,
) -> ServiceContainer:
    """
    Wire all repositories and services together.

    This is the single composition root for the service layer.  The
    application entry-point calls this once at startup and passes the
    returned dict to views as needed.

    Args:
        config: Application configuration.
        session: Shared in-memory session holder.
        http_session: Optional ``requests.Session`` (tests inject a fake).
        token_store: Optional pre-built token store.
        logger: Optional logger; ``get_logger("services")`` otherwise.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    logger = logger or get_logger("services")

    # ------------------------------------------------------------------
    # 1. Transport
    # ------------------------------------------------------------------
    tokens = token_store or TokenStore(config.TOKEN_STORE_PATH, logger)
    api = PortalApiClient(config, tokens, logger.child("api"), session=http_session)

    # ------------------------------------------------------------------
    # 2. Repositories (data-access layer)
    # ------------------------------------------------------------------
    auth_repo = AuthRepository(api, logger)
    user_repo = UserRepository(api, logger)
    enrollment_repo = EnrollmentRepository(api, logger)
    application_repo = ApplicationRepository(api, logger)
    tna_repo = TnaRepository(api, logger)
    rtec_repo = RtecMeetingRepository(api, logger)
    notification_repo = NotificationRepository(api, logger)
    document_repos = {
        kind: ProjectDocumentRepository(api, logger, kind) for kind in DocumentKind
    }

    # ------------------------------------------------------------------
    # 3. Services
    # ------------------------------------------------------------------
    native_opener_service = NativeOpenerService(logger=logger)

    return ServiceContainer(
        api_client=api,
        token_store=tokens,
        auth_service=AuthService(auth_repo, tokens, session, logger),
        user_service=UserService(user_repo, session, logger),
        enrollment_service=EnrollmentService(enrollment_repo, session, logger),
        application_service=ApplicationService(application_repo, session, logger),
        tna_service=TnaService(tna_repo, session, logger),
        rtec_service=RtecService(rtec_repo, session, logger),
        document_service=DocumentService(
            document_repos,
            native_opener_service,
            session,
            logger,
            download_dir=config.DOWNLOAD_DIR,
        ),
        notification_service=NotificationService(notification_repo, session, logger),
        native_opener_service=native_opener_service,
    )
