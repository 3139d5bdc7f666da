"""
REST Response Envelope.

Most endpoints answer ``{success, message?, <payload key>: ...}`` where
the payload key varies by endpoint (``data``, ``applications``,
``notifications``, ``meetings`` ...).  Some older endpoints return the
bare payload without an envelope.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

# Payload keys in the order they are tried when the caller does not name one.
PAYLOAD_KEYS: tuple[str, ...] = (
    "data",
    "applications",
    "notifications",
    "enrollments",
    "meetings",
    "tnas",
    "users",
    "documents",
)


class ApiEnvelope(BaseModel):
    """Parsed response envelope.  Extra keys are kept for payload lookup."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    message: Optional[str] = None

    def payload(self, key: Optional[str] = None) -> Any:
        """Return the payload under *key*, or the first known payload key present."""
        extras = self.model_extra or {}
        if key is not None:
            return extras.get(key)
        for candidate in PAYLOAD_KEYS:
            if candidate in extras:
                return extras[candidate]
        return None
