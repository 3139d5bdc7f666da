"""
Authentication Service.

Login, logout, session restore, proponent self-registration and the
password-reset flow.  ``LoginView`` only collects input and renders the
returned ``AuthResult``; it never sees a client exception.

Field checks run before any request so an obviously bad form costs no
round trip.  The backend repeats them and its message wins when the
two disagree.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import ValidationError

from portal.api_client import ApiConnectionError, ApiError, PortalApiError, SessionExpiredError
from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.auth_models import AuthErrorCode, AuthResult
from portal.models.enums import UserRole
from portal.models.user import User
from portal.repositories.auth_repository import AuthRepository
from portal.token_store import TokenStore
from portal.utils.string_helpers import normalize_keys

_EMAIL_RE: re.Pattern[str] = re.compile(r"^[^@\s]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$")

# Backend account schema: minlength 6.
MIN_PASSWORD_LENGTH: int = 6

_CONTROL_CHARS: re.Pattern[str] = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def email_problem(email: str) -> Optional[str]:
    """Why *email* is unusable, or ``None``."""
    if not email.strip():
        return "Email address is required."
    if not _EMAIL_RE.match(email.strip()):
        return "Please enter a valid email address."
    return None


def password_problem(password: str) -> Optional[str]:
    if not password:
        return "Password is required."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    return None


def name_problem(name: str, label: str) -> Optional[str]:
    if not name.strip():
        return f"{label} is required."
    if _CONTROL_CHARS.search(name):
        return f"{label} may only contain printable characters."
    return None


def _fail(code: AuthErrorCode, message: Optional[str]) -> AuthResult:
    return AuthResult(success=False, error_code=code, error_message=message)


def _signed_in(user: User) -> AuthResult:
    return AuthResult(
        success=True,
        user_id=user.id,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
    )


class AuthService:
    """Authentication flows for the desktop client.

    Parameters
    ----------
    repo:
        ``/auth/*`` and ``/users/create`` endpoints.
    token_store:
        Persisted ``authToken`` / ``isLoggedIn`` / ``userData``.
    session:
        Holds the signed-in ``User`` for every other service.
    logger:
        Structured JSON logger.
    """

    def __init__(
        self,
        repo: AuthRepository,
        token_store: TokenStore,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        self._repo = repo
        self._tokens = token_store
        self._session = session
        self._logger = logger

    # -- Sign in / out ----------------------------------------------------------

    def login(self, email: str, password: str) -> AuthResult:
        """``POST /auth/login``; on success persist the token and set the session user."""
        email = email.strip().lower()
        problem = email_problem(email) or ("Password is required." if not password else None)
        if problem:
            return _fail(AuthErrorCode.VALIDATION_ERROR, problem)

        try:
            token, raw_user = self._repo.login(email, password)
            user = User.model_validate(normalize_keys(raw_user))
        except PortalApiError as exc:
            return self._login_failure(exc, email)
        except ValidationError as exc:
            self._logger.error("Login for %s returned an unreadable user: %s", email, exc)
            return _fail(AuthErrorCode.UNKNOWN_ERROR, "Unexpected response from server.")

        self._tokens.save(token, raw_user)
        self._session.set_current_user(user)
        self._logger.info(
            "Signed in %s as %s.",
            user.email,
            user.role,
            extra={"event": "LOGIN", "user_id": user.id},
        )
        return _signed_in(user)

    def _login_failure(self, exc: PortalApiError, email: str) -> AuthResult:
        if isinstance(exc, ApiConnectionError):
            return _fail(AuthErrorCode.NETWORK_ERROR, exc.message)
        rejected = isinstance(exc, SessionExpiredError) or (
            isinstance(exc, ApiError) and exc.status_code in (400, 401, 403)
        )
        if rejected:
            self._logger.warning("Login rejected for %s: %s", email, exc.message)
            return _fail(AuthErrorCode.INVALID_CREDENTIALS, exc.message or "Invalid email or password.")
        self._logger.error("Login failed for %s: %s", email, exc.message)
        return _fail(AuthErrorCode.UNKNOWN_ERROR, exc.message or "Login failed. Please try again.")

    def logout(self) -> None:
        """Forget the stored token, then clear the session (listeners see ``None``)."""
        user = self._session.current_user
        self._tokens.clear()
        self._session.clear()
        self._logger.info(
            "Signed out %s.",
            user.email if user else "anonymous session",
            extra={"event": "LOGOUT", "user_id": user.id if user else None},
        )

    def restore_session(self) -> AuthResult:
        """Reinstate the user saved by a previous run.

        The token itself is not checked here.  If it has expired the
        first authenticated request gets a 401, which wipes the store
        and ends the session.
        """
        stored = self._tokens.get_user()
        if not (self._tokens.is_logged_in and stored):
            return _fail(AuthErrorCode.SESSION_EXPIRED, "No saved session.")
        try:
            user = User.model_validate(normalize_keys(stored))
        except ValidationError as exc:
            self._logger.warning("Discarding unreadable saved user: %s", exc)
            self._tokens.clear()
            return _fail(AuthErrorCode.SESSION_EXPIRED, "Saved session is no longer valid.")
        self._session.set_current_user(user)
        self._logger.info("Restored session for %s.", user.email)
        return _signed_in(user)

    # -- Registration -----------------------------------------------------------

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
        *,
        province: Optional[str] = None,
        department: str = "Enterprise",
        position: str = "Proponent",
    ) -> AuthResult:
        """Create a proponent account.  The caller still has to sign in."""
        email = email.strip().lower()
        problem = (
            name_problem(first_name, "First name")
            or name_problem(last_name, "Last name")
            or email_problem(email)
            or password_problem(password)
            or ("Passwords do not match." if password != confirm_password else None)
        )
        if problem:
            return _fail(AuthErrorCode.VALIDATION_ERROR, problem)

        first, last = first_name.strip(), last_name.strip()
        payload: dict[str, Any] = {
            "first_name": first,
            "last_name": last,
            "email": email,
            "password": password,
            "role": UserRole.PROPONENT,
            "department": department,
            "position": position,
            "province": province,
        }
        try:
            created = self._repo.register(payload)
        except PortalApiError as exc:
            return self._request_failure(exc, "Registration")

        self._logger.info("Registered proponent %s.", email, extra={"event": "REGISTER"})
        return AuthResult(
            success=True,
            user_id=str(created.get("id") or created.get("_id") or "") or None,
            email=email,
            full_name=f"{first} {last}",
            role=UserRole.PROPONENT,
            message="Account created. You can now sign in.",
        )

    # -- Password reset ---------------------------------------------------------

    def forgot_password(self, email: str) -> AuthResult:
        email = email.strip().lower()
        problem = email_problem(email)
        if problem:
            return _fail(AuthErrorCode.VALIDATION_ERROR, problem)
        try:
            message = self._repo.forgot_password(email)
        except PortalApiError as exc:
            return self._request_failure(exc, "Password reset request")
        return AuthResult(
            success=True,
            email=email,
            message=message or "If the address is registered, a reset link has been sent.",
        )

    def verify_reset_token(self, token: str) -> AuthResult:
        if not token.strip():
            return _fail(AuthErrorCode.VALIDATION_ERROR, "Reset token is required.")
        try:
            self._repo.verify_reset_token(token.strip())
        except PortalApiError as exc:
            return self._request_failure(exc, "Reset token check")
        return AuthResult(success=True)

    def reset_password(self, token: str, password: str, confirm_password: str) -> AuthResult:
        problem = password_problem(password) or (
            "Passwords do not match." if password != confirm_password else None
        )
        if problem:
            return _fail(AuthErrorCode.VALIDATION_ERROR, problem)
        try:
            message = self._repo.reset_password(token.strip(), password)
        except PortalApiError as exc:
            return self._request_failure(exc, "Password reset")
        self._logger.info("Password reset completed.", extra={"event": "PASSWORD_RESET"})
        return AuthResult(success=True, message=message or "Password updated.")

    def _request_failure(self, exc: PortalApiError, action: str) -> AuthResult:
        """400/409 are form problems the user can fix; anything else is unknown."""
        if isinstance(exc, ApiConnectionError):
            return _fail(AuthErrorCode.NETWORK_ERROR, exc.message)
        self._logger.warning("%s rejected: %s", action, exc.message)
        fixable = isinstance(exc, ApiError) and exc.status_code in (400, 409)
        return _fail(AuthErrorCode.VALIDATION_ERROR if fixable else AuthErrorCode.UNKNOWN_ERROR, exc.message)
