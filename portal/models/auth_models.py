"""
Authentication Models.

What ``AuthService`` hands back to the login screen, and the on-disk
shape of the saved session.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthErrorCode(StrEnum):
    """Why an auth call failed; the login screen picks its wording from this."""

    INVALID_CREDENTIALS = "invalid_credentials"
    NETWORK_ERROR = "network_error"
    VALIDATION_ERROR = "validation_error"
    SESSION_EXPIRED = "session_expired"
    UNKNOWN_ERROR = "unknown_error"


class AuthResult(BaseModel):
    """Outcome of login, registration, restore and password-reset calls.

    On success the identity fields describe the signed-in (or newly
    created) user and ``message`` carries any backend notice.  On failure
    only ``error_code`` and ``error_message`` are set.
    """

    success: bool
    error_code: Optional[AuthErrorCode] = None
    error_message: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[str] = None
    message: Optional[str] = None


class StoredSession(BaseModel):
    """Token store file.  Aliases are the web client's ``localStorage`` keys."""

    model_config = ConfigDict(populate_by_name=True)

    auth_token: Optional[str] = Field(default=None, alias="authToken")
    is_logged_in: bool = Field(default=False, alias="isLoggedIn")
    user_data: Optional[dict[str, Any]] = Field(default=None, alias="userData")
