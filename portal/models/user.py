"""
User Model.

Shape of the ``user`` object returned by ``POST /api/auth/login`` and by
the ``/api/users`` endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from portal.models.base import PortalDocument
from portal.models.enums import UserRole


class User(PortalDocument):
    """Represents a portal account.

    ``role`` is kept as a plain string: super-admin tooling on the server
    occasionally writes roles the client does not know about, and those
    users should still be able to sign in and see the modules open to
    everyone.
    """

    user_id: Optional[str] = None
    email: str = ""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    role: str = UserRole.PROPONENT
    province: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    status: Optional[str] = None
    is_active: Optional[bool] = None
    last_login: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        """Display name: ``name`` when sent, else first + last, else email."""
        if self.name:
            return self.name
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.email
