"""
DOST-MIMAROPA Portal desktop client.

Wires configuration, the session, the service container and the module
registry together, resumes a saved sign-in, then runs the Tk main loop.

Usage::

    python main.py
"""

from __future__ import annotations

import sys
import traceback

from portal.auth import SessionManager
from portal.config import AppConfig, get_config
from portal.logger import StructuredLogger, get_logger
from portal.models.enums import UserRole
from portal.services import ServiceContainer, create_services
from portal.ui.app_shell import NOTIFICATIONS_MODULE_ID, AppShell
from portal.ui.module_registry import ModuleRegistry
from portal.ui.views.application_monitor_view import ApplicationMonitorView
from portal.ui.views.enrollments_view import EnrollmentsView
from portal.ui.views.notifications_view import NotificationsView
from portal.ui.views.tna_queue_view import TnaQueueView

_STAFF: frozenset[str] = frozenset({UserRole.PSTO, UserRole.DOST_MIMAROPA, UserRole.SUPER_ADMIN})


def register_modules(
    registry: ModuleRegistry,
    app: AppShell,
    services: ServiceContainer,
    session: SessionManager,
    config: AppConfig,
) -> None:
    """Sidebar modules, in display order.  Notifications is open to every role."""
    registry.register(
        "applications",
        "Applications",
        "\U0001F4C4",
        lambda parent: ApplicationMonitorView(
            parent=parent,
            application_service=services["application_service"],
            document_service=services["document_service"],
            session=session,
            logger=get_logger("applications"),
        ),
        required_roles=frozenset({UserRole.PROPONENT, UserRole.PSTO}),
    )
    registry.register(
        "enrollments",
        "Enrollments",
        "\U0001F4CB",
        lambda parent: EnrollmentsView(
            parent=parent,
            enrollment_service=services["enrollment_service"],
            session=session,
            logger=get_logger("enrollments"),
        ),
        required_roles=_STAFF,
        default=True,
    )
    registry.register(
        "tna_queue",
        "TNA Queue",
        "\U0001F50E",
        lambda parent: TnaQueueView(
            parent=parent,
            tna_service=services["tna_service"],
            document_service=services["document_service"],
            session=session,
            logger=get_logger("tna"),
        ),
        required_roles=_STAFF,
    )
    registry.register(
        NOTIFICATIONS_MODULE_ID,
        "Notifications",
        "\U0001F514",
        lambda parent: NotificationsView(
            parent=parent,
            notification_service=services["notification_service"],
            poll_interval_s=config.NOTIFICATION_POLL_INTERVAL_S,
            logger=get_logger("notifications"),
            on_unread_changed=lambda count: app.set_module_count(NOTIFICATIONS_MODULE_ID, count),
        ),
    )


def main() -> None:
    logger: StructuredLogger = get_logger("main")
    config = get_config()
    logger.info("Starting portal client against %s", config.API_BASE_URL)

    session = SessionManager()
    services = create_services(config=config, session=session, logger=get_logger("services"))

    # The stored token is only checked by the first authenticated request.
    restored = services["auth_service"].restore_session()
    if restored.success:
        logger.info("Resumed saved session for %s.", restored.email)

    registry = ModuleRegistry(logger=get_logger("modules"))
    app = AppShell(
        config=config,
        session=session,
        services=services,
        registry=registry,
        logger=get_logger("ui"),
    )
    register_modules(registry, app, services, session, config)

    app.launch()
    try:
        app.mainloop()
    finally:
        services["api_client"].close()
        logger.info("Portal client closed.")


def _report_crash(exc: BaseException) -> None:
    """Plain tkinter message box, or stderr when no display is available."""
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        import tkinter
        from tkinter import messagebox

        root = tkinter.Tk()
        root.withdraw()
        messagebox.showerror(
            title="DOST-MIMAROPA Portal",
            message=f"The portal client stopped unexpectedly.\n\n{type(exc).__name__}: {exc}",
            detail=detail,
        )
        root.destroy()
    except Exception:
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n{detail}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        get_logger("main").exception("Fatal error; shutting down.")
        _report_crash(exc)
        sys.exit(1)
