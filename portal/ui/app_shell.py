"""Main Window.

Owns exactly one screen at a time: the ``LoginView`` or, once signed
in, the ``ModuleHost``.  Logout, or a 401 from any request (which
clears the ``SessionManager``), swaps back to the login screen.

While signed in, the unread notification count is fetched on a daemon
thread every ``NOTIFICATION_POLL_INTERVAL_S`` seconds and shown beside
the Notifications entry.
"""

from __future__ import annotations

import threading
from typing import Optional, Union

import customtkinter as ctk

from portal import __version__
from portal.auth import SessionManager
from portal.config import AppConfig
from portal.logger import StructuredLogger
from portal.models.service_models import ServiceResult
from portal.models.user import User
from portal.services import ServiceContainer
from portal.ui.login_view import LoginView
from portal.ui.module_host import ModuleHost
from portal.ui.module_registry import ModuleRegistry
from portal.ui.theme import LOGIN_WINDOW_HEIGHT, LOGIN_WINDOW_WIDTH, MAIN_WINDOW_HEIGHT, MAIN_WINDOW_WIDTH

NOTIFICATIONS_MODULE_ID: str = "notifications"

SESSION_EXPIRED_MESSAGE: str = "Your session has expired. Please sign in again."


class AppShell(ctk.CTk):
    """Top-level window.

    Parameters
    ----------
    config:
        Window sizing and the unread poll interval.
    session:
        Shared session; the shell listens for it being cleared.
    services:
        Service container from ``create_services``.
    registry:
        Modules, registered by ``main`` before ``launch()``.
    logger:
        Structured logger instance.
    """

    def __init__(
        self,
        config: AppConfig,
        session: SessionManager,
        services: ServiceContainer,
        registry: ModuleRegistry,
        logger: StructuredLogger,
    ) -> None:
        super().__init__()
        self._config = config
        self._session = session
        self._services = services
        self._registry = registry
        self._logger = logger

        self._screen: Optional[Union[LoginView, ModuleHost]] = None
        self._unread_job: Optional[str] = None
        self._logging_out = False

        ctk.set_appearance_mode("light")
        ctk.set_default_color_theme("blue")
        self.title("DOST-MIMAROPA Portal")
        self.geometry(f"{MAIN_WINDOW_WIDTH}x{MAIN_WINDOW_HEIGHT}")
        self.minsize(LOGIN_WINDOW_WIDTH, LOGIN_WINDOW_HEIGHT)
        self.protocol("WM_DELETE_WINDOW", self._on_close)
        session.add_listener(self._on_session_changed)

    def launch(self) -> None:
        """Module screen for a restored session, else the login form."""
        if self._session.is_authenticated:
            self._show_modules()
        else:
            self._show_login()

    def set_module_count(self, module_id: str, count: int) -> None:
        """Sidebar tag beside *module_id*.  UI thread only."""
        if isinstance(self._screen, ModuleHost):
            self._screen.set_count(module_id, count)

    # -- Screens -------------------------------------------------------------

    def _swap(self, screen: Union[LoginView, ModuleHost]) -> None:
        self._stop_unread_poll()
        if self._screen is not None:
            self._screen.destroy()
        self._screen = screen
        screen.pack(fill="both", expand=True)

    def _show_login(self, message: Optional[str] = None) -> None:
        login = LoginView(
            parent=self,
            auth_service=self._services["auth_service"],
            on_login_success=self._show_modules,
            logger=self._logger,
        )
        self._swap(login)
        if message:
            login.show_message(message)

    def _show_modules(self) -> None:
        user = self._session.get_current_user()
        self._logger.info("Signed in as %s (%s).", user.full_name, user.role)
        host = ModuleHost(
            parent=self,
            registry=self._registry,
            session=self._session,
            on_logout=self._logout,
            logger=self._logger,
            version=__version__,
        )
        self._swap(host)
        if host.shows(NOTIFICATIONS_MODULE_ID):
            self._poll_unread()

    # -- Session -------------------------------------------------------------

    def _logout(self) -> None:
        self._logging_out = True
        try:
            self._services["auth_service"].logout()
        finally:
            self._logging_out = False
        self._show_login()

    def _on_session_changed(self, user: Optional[User]) -> None:
        """Session listener; may fire on a worker thread."""
        if user is None and not self._logging_out:
            self.after(0, self._expire_session)

    def _expire_session(self) -> None:
        if isinstance(self._screen, LoginView):
            return
        self._logger.warning("Session ended by the server; returning to login.")
        self._show_login(SESSION_EXPIRED_MESSAGE)

    # -- Unread count --------------------------------------------------------

    def _poll_unread(self) -> None:
        if not self._session.is_authenticated:
            return
        notifications = self._services["notification_service"]

        def fetch() -> None:
            result = notifications.unread_count()
            self.after(0, self._show_unread, result)

        threading.Thread(target=fetch, name="unread-poll", daemon=True).start()
        self._unread_job = self.after(
            max(1, self._config.NOTIFICATION_POLL_INTERVAL_S) * 1000, self._poll_unread,
        )

    def _show_unread(self, result: ServiceResult[int]) -> None:
        if result.success and result.data is not None:
            self.set_module_count(NOTIFICATIONS_MODULE_ID, result.data)

    def _stop_unread_poll(self) -> None:
        if self._unread_job is not None:
            self.after_cancel(self._unread_job)
            self._unread_job = None

    def _on_close(self) -> None:
        self._stop_unread_poll()
        self._session.remove_listener(self._on_session_changed)
        self.destroy()
