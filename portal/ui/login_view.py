"""Sign-in Screen.

Sign In / Create Account tabs plus an inline forgot-password form.
Authentication runs against the portal API via ``AuthService`` on a
worker thread; results are marshalled back with ``self.after(0, ...)``.

No business logic lives here: the view collects input, calls
``AuthService`` and shows the result.
"""

from __future__ import annotations

import threading
import tkinter as tk
from typing import Callable, Optional

import customtkinter as ctk

from portal.logger import StructuredLogger
from portal.models.auth_models import AuthResult
from portal.models.enums import Province
from portal.services.auth_service import AuthService
from portal.ui.theme import (
    ACCENT_HOVER,
    ACCENT_PRIMARY,
    CONTENT_BG,
    CONTENT_CARD_BG,
    CORNER_RADIUS,
    ERROR_TEXT,
    FONT_BODY,
    FONT_BRAND,
    FONT_BUTTON,
    FONT_CAPTION,
    FONT_LABEL,
    FONT_SMALL,
    FONT_SUBTITLE,
    INPUT_BG,
    INPUT_BORDER,
    PADDING_LG,
    PADDING_MD,
    PADDING_SM,
    SUCCESS_TEXT,
    TAB_BORDER,
    TAB_HOVER,
    TEXT_LIGHT,
    TEXT_PRIMARY,
    TEXT_SECONDARY,
)

_CARD_WIDTH: int = 420
_TAB_HEIGHT: int = 42
_INPUT_HEIGHT: int = 40
_BUTTON_HEIGHT: int = 46
_BRAND_ICON_SIZE: int = 56
_SIGN_IN_TEXT: str = "Sign In  →"
_REGISTER_TEXT: str = "Create Account  →"


class LoginView(ctk.CTkFrame):
    """Full-screen login frame with Sign In / Create Account tabs.

    Parameters
    ----------
    parent:
        The root ``CTk`` window this frame belongs to.
    auth_service:
        Login, registration and password-reset operations.
    on_login_success:
        Callback invoked (on the main thread) after successful login.
    logger:
        Structured JSON logger.
    """

    def __init__(
        self,
        parent: ctk.CTk,
        auth_service: AuthService,
        on_login_success: Callable[[], None],
        logger: StructuredLogger,
    ) -> None:
        super().__init__(parent, fg_color=CONTENT_BG)

        self._auth_service = auth_service
        self._on_login_success = on_login_success
        self._logger = logger
        self._active_tab: str = "sign_in"

        self._email_entry: Optional[ctk.CTkEntry] = None
        self._password_entry: Optional[ctk.CTkEntry] = None
        self._login_button: Optional[ctk.CTkButton] = None
        self._message_label: Optional[ctk.CTkLabel] = None

        self._forgot_frame: Optional[ctk.CTkFrame] = None
        self._forgot_email_entry: Optional[ctk.CTkEntry] = None
        self._forgot_button: Optional[ctk.CTkButton] = None
        self._forgot_message_label: Optional[ctk.CTkLabel] = None

        self._reg_entries: dict[str, ctk.CTkEntry] = {}
        self._reg_province: Optional[ctk.CTkOptionMenu] = None
        self._reg_button: Optional[ctk.CTkButton] = None
        self._reg_message_label: Optional[ctk.CTkLabel] = None

        self._build_ui()

    # ------------------------------------------------------------------
    # UI Construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)
        self.grid_rowconfigure(2, weight=0)
        self.grid_rowconfigure(3, weight=1)
        self.grid_columnconfigure(0, weight=1)

        card = ctk.CTkFrame(
            self,
            width=_CARD_WIDTH,
            fg_color=CONTENT_CARD_BG,
            corner_radius=16,
            border_width=1,
            border_color=TAB_BORDER,
        )
        card.grid(row=1, column=0, pady=(0, PADDING_SM))

        inner = ctk.CTkFrame(card, fg_color="transparent")
        inner.pack(fill="both", expand=True, padx=36, pady=28)

        icon_frame = ctk.CTkFrame(
            inner,
            width=_BRAND_ICON_SIZE,
            height=_BRAND_ICON_SIZE,
            corner_radius=14,
            fg_color=ACCENT_PRIMARY,
        )
        icon_frame.pack(pady=(0, 12))
        icon_frame.pack_propagate(False)
        ctk.CTkLabel(
            icon_frame, text="DOST", font=("Segoe UI", 14, "bold"), text_color=TEXT_LIGHT,
        ).place(relx=0.5, rely=0.5, anchor="center")

        ctk.CTkLabel(inner, text="DOST-MIMAROPA Portal", font=FONT_BRAND, text_color=TEXT_PRIMARY).pack(
            pady=(0, 2),
        )
        ctk.CTkLabel(
            inner,
            text="SETUP • GIA • CEST • SSCP program management",
            font=FONT_SUBTITLE,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(0, PADDING_LG))

        tab_bar = ctk.CTkFrame(inner, fg_color="transparent", height=_TAB_HEIGHT)
        tab_bar.pack(fill="x", pady=(0, PADDING_MD))
        tab_bar.pack_propagate(False)
        tab_bar.grid_columnconfigure(0, weight=1)
        tab_bar.grid_columnconfigure(1, weight=1)

        self._sign_in_tab = self._tab_button(tab_bar, "Sign In", "sign_in")
        self._sign_in_tab.grid(row=0, column=0, sticky="nsew")
        self._register_tab = self._tab_button(tab_bar, "Create Account", "register")
        self._register_tab.grid(row=0, column=1, sticky="nsew")

        self._sign_in_frame = ctk.CTkFrame(inner, fg_color="transparent")
        self._build_sign_in_tab(self._sign_in_frame)
        self._register_frame = ctk.CTkFrame(inner, fg_color="transparent")
        self._build_register_tab(self._register_frame)

        self._sign_in_frame.pack(fill="both", expand=True)
        self._style_tabs()

        ctk.CTkLabel(
            self,
            text="Department of Science and Technology • MIMAROPA Region",
            font=FONT_CAPTION,
            text_color=TEXT_SECONDARY,
        ).grid(row=2, column=0, pady=(PADDING_SM, 0))

    def _tab_button(self, parent: ctk.CTkFrame, text: str, tab: str) -> ctk.CTkButton:
        return ctk.CTkButton(
            parent,
            text=text,
            font=("Segoe UI", 13),
            fg_color="transparent",
            hover_color=TAB_HOVER,
            text_color=TEXT_SECONDARY,
            height=_TAB_HEIGHT,
            corner_radius=0,
            border_width=1,
            border_color=INPUT_BORDER,
            command=lambda: self._switch_tab(tab),
        )

    def _entry(self, parent: ctk.CTkFrame, label: str, placeholder: str = "", secret: bool = False) -> ctk.CTkEntry:
        ctk.CTkLabel(parent, text=label, font=FONT_LABEL, text_color=TEXT_PRIMARY, anchor="w").pack(
            fill="x", pady=(0, 4),
        )
        entry = ctk.CTkEntry(
            parent,
            placeholder_text=placeholder,
            font=FONT_BODY,
            fg_color=INPUT_BG,
            border_color=INPUT_BORDER,
            text_color=TEXT_PRIMARY,
            show="*" if secret else "",
            height=_INPUT_HEIGHT,
            corner_radius=CORNER_RADIUS,
        )
        entry.pack(fill="x", pady=(0, PADDING_SM))
        return entry

    def _primary_button(self, parent: ctk.CTkFrame, text: str, command: Callable[[], None]) -> ctk.CTkButton:
        button = ctk.CTkButton(
            parent,
            text=text,
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            height=_BUTTON_HEIGHT,
            corner_radius=CORNER_RADIUS,
            command=command,
        )
        button.pack(fill="x", pady=(PADDING_SM, PADDING_SM))
        return button

    def _message(self, parent: ctk.CTkFrame) -> ctk.CTkLabel:
        return ctk.CTkLabel(parent, text="", font=FONT_SMALL, text_color=ERROR_TEXT, wraplength=_CARD_WIDTH - 100)

    def _build_sign_in_tab(self, parent: ctk.CTkFrame) -> None:
        self._email_entry = self._entry(parent, "EMAIL ADDRESS", "name@example.com")
        self._password_entry = self._entry(parent, "PASSWORD", "••••••••", secret=True)
        self._login_button = self._primary_button(parent, _SIGN_IN_TEXT, self._handle_login)
        self._message_label = self._message(parent)

        ctk.CTkButton(
            parent,
            text="Forgot Password?",
            font=FONT_SMALL,
            fg_color="transparent",
            hover_color=TAB_HOVER,
            text_color=ACCENT_PRIMARY,
            height=28,
            corner_radius=CORNER_RADIUS,
            command=self._toggle_forgot_password,
        ).pack(side="bottom", pady=(PADDING_SM, 0))

        self._forgot_frame = ctk.CTkFrame(parent, fg_color="transparent")
        self._forgot_email_entry = self._entry(
            self._forgot_frame, "RESET LINK EMAIL", "name@example.com",
        )
        self._forgot_button = ctk.CTkButton(
            self._forgot_frame,
            text="Send Reset Link",
            font=FONT_BUTTON,
            fg_color=ACCENT_PRIMARY,
            hover_color=ACCENT_HOVER,
            text_color=TEXT_LIGHT,
            height=36,
            corner_radius=CORNER_RADIUS,
            command=self._handle_forgot_password,
        )
        self._forgot_button.pack(fill="x", pady=(0, PADDING_SM))
        self._forgot_message_label = self._message(self._forgot_frame)
        self._forgot_message_label.pack(fill="x")

        self._email_entry.bind("<Return>", self._on_enter_key)
        self._password_entry.bind("<Return>", self._on_enter_key)

    def _build_register_tab(self, parent: ctk.CTkFrame) -> None:
        names = ctk.CTkFrame(parent, fg_color="transparent")
        names.pack(fill="x")
        names.grid_columnconfigure(0, weight=1)
        names.grid_columnconfigure(1, weight=1)
        first = ctk.CTkFrame(names, fg_color="transparent")
        first.grid(row=0, column=0, sticky="ew")
        last = ctk.CTkFrame(names, fg_color="transparent")
        last.grid(row=0, column=1, sticky="ew", padx=(PADDING_SM, 0))
        self._reg_entries["first_name"] = self._entry(first, "FIRST NAME", "e.g. Juan")
        self._reg_entries["last_name"] = self._entry(last, "LAST NAME", "e.g. Dela Cruz")

        self._reg_entries["email"] = self._entry(parent, "EMAIL ADDRESS", "name@example.com")
        self._reg_entries["password"] = self._entry(parent, "PASSWORD", "At least 6 characters", secret=True)
        self._reg_entries["confirm_password"] = self._entry(parent, "CONFIRM PASSWORD", "", secret=True)

        ctk.CTkLabel(parent, text="PROVINCE", font=FONT_LABEL, text_color=TEXT_PRIMARY, anchor="w").pack(
            fill="x", pady=(0, 4),
        )
        self._reg_province = ctk.CTkOptionMenu(parent, values=[p.value for p in Province])
        self._reg_province.pack(fill="x", pady=(0, PADDING_SM))

        self._reg_button = self._primary_button(parent, _REGISTER_TEXT, self._handle_register)
        self._reg_message_label = self._message(parent)

        ctk.CTkLabel(
            parent,
            text="New accounts are created as proponents.",
            font=FONT_CAPTION,
            text_color=TEXT_SECONDARY,
        ).pack(pady=(PADDING_SM, 0))

    # ------------------------------------------------------------------
    # Tab switching
    # ------------------------------------------------------------------

    def _switch_tab(self, tab: str) -> None:
        if tab == self._active_tab:
            return
        self._active_tab = tab
        self._clear(self._message_label)
        self._clear(self._reg_message_label)
        if tab == "sign_in":
            self._register_frame.pack_forget()
            self._sign_in_frame.pack(fill="both", expand=True)
        else:
            self._sign_in_frame.pack_forget()
            self._register_frame.pack(fill="both", expand=True)
        self._style_tabs()

    def _style_tabs(self) -> None:
        for tab, button in (("sign_in", self._sign_in_tab), ("register", self._register_tab)):
            active = tab == self._active_tab
            button.configure(
                text_color=ACCENT_PRIMARY if active else TEXT_SECONDARY,
                border_color=ACCENT_PRIMARY if active else INPUT_BORDER,
                border_width=2 if active else 1,
                font=("Segoe UI", 13, "bold") if active else ("Segoe UI", 13),
            )

    # ------------------------------------------------------------------
    # Sign In
    # ------------------------------------------------------------------

    def _on_enter_key(self, event: tk.Event[tk.Misc]) -> None:
        self._handle_login()

    def _handle_login(self) -> None:
        email = self._email_entry.get().strip()
        password = self._password_entry.get()
        if not email or not password:
            self._show(self._message_label, "Please enter email and password.")
            return

        self._clear(self._message_label)
        self._login_button.configure(text="Signing in...", state="disabled")
        threading.Thread(target=self._authenticate, args=(email, password), daemon=True).start()

    def _authenticate(self, email: str, password: str) -> None:
        """Background thread: delegate to ``AuthService.login()``."""
        result = self._auth_service.login(email, password)

        def finish() -> None:
            self._login_button.configure(text=_SIGN_IN_TEXT, state="normal")
            if result.success:
                self._on_login_success()
            else:
                self._show(self._message_label, result.error_message or "Login failed.")

        self.after(0, finish)

    # ------------------------------------------------------------------
    # Create Account
    # ------------------------------------------------------------------

    def _handle_register(self) -> None:
        values = {key: entry.get() for key, entry in self._reg_entries.items()}
        values = {key: (value if "password" in key else value.strip()) for key, value in values.items()}
        if not all(values.values()):
            self._show(self._reg_message_label, "All fields are required.")
            return
        province = self._reg_province.get() if self._reg_province is not None else None

        self._clear(self._reg_message_label)
        self._reg_button.configure(text="Creating account...", state="disabled")

        def do_register() -> None:
            result = self._auth_service.register(
                values["first_name"],
                values["last_name"],
                values["email"],
                values["password"],
                values["confirm_password"],
                province=province,
            )
            self.after(0, self._show_registration_result, result)

        threading.Thread(target=do_register, daemon=True).start()

    def _show_registration_result(self, result: AuthResult) -> None:
        self._reg_button.configure(text=_REGISTER_TEXT, state="normal")
        if not result.success:
            self._show(self._reg_message_label, result.error_message or "Registration failed.")
            return
        self._show(self._reg_message_label, result.message or "Account created.", SUCCESS_TEXT)
        for entry in self._reg_entries.values():
            entry.delete(0, "end")
        self.after(3000, lambda: self._switch_tab("sign_in"))

    # ------------------------------------------------------------------
    # Forgot Password
    # ------------------------------------------------------------------

    def _toggle_forgot_password(self) -> None:
        if self._forgot_frame.winfo_manager():
            self._forgot_frame.pack_forget()
        else:
            self._forgot_frame.pack(fill="x", pady=(PADDING_SM, 0))
            self._forgot_message_label.configure(text="")

    def _handle_forgot_password(self) -> None:
        email = self._forgot_email_entry.get().strip()
        if not email:
            self._forgot_message_label.configure(text="Please enter your email address.", text_color=ERROR_TEXT)
            return

        self._forgot_button.configure(text="Sending...", state="disabled")

        def do_reset() -> None:
            result = self._auth_service.forgot_password(email)

            def show_reset_result() -> None:
                self._forgot_message_label.configure(
                    text=(result.message if result.success else result.error_message) or "",
                    text_color=SUCCESS_TEXT if result.success else ERROR_TEXT,
                )
                self._forgot_button.configure(text="Send Reset Link", state="normal")

            self.after(0, show_reset_result)

        threading.Thread(target=do_reset, daemon=True).start()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def show_message(self, message: str) -> None:
        """Show an informational message above the sign-in form."""
        self._switch_tab("sign_in")
        self._show(self._message_label, message)

    @staticmethod
    def _show(label: Optional[ctk.CTkLabel], message: str, color: str = ERROR_TEXT) -> None:
        if label is not None:
            label.configure(text=message, text_color=color)
            label.pack(fill="x")

    @staticmethod
    def _clear(label: Optional[ctk.CTkLabel]) -> None:
        if label is not None:
            label.configure(text="")
            label.pack_forget()
