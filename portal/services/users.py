"""
User Management Service.

Handles administrative user operations: listing, profile edits and
account activation, plus the PSTO view of the proponents in its
province.
"""

from __future__ import annotations

from typing import Any, Optional

from portal.auth import SessionManager
from portal.logger import StructuredLogger
from portal.models.enums import UserRole
from portal.models.service_models import ServiceResult
from portal.models.user import User
from portal.repositories.user_repository import UserRepository
from portal.services.base_service import BaseService
from portal.utils.audit import log_audit_event

# Fields an administrator may edit through ``update_user``.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"first_name", "last_name", "email", "role", "department", "position", "province", "status"}
)


class UserService(BaseService):
    """Service layer for admin user management operations."""

    def __init__(
        self,
        repo: UserRepository,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger, session)
        self._repo = repo

    def _require_admin(self) -> Optional[ServiceResult]:
        if self._session is None or not self._session.has_role(UserRole.SUPER_ADMIN, UserRole.DOST_MIMAROPA):
            return ServiceResult(
                success=False,
                error="Only administrators can manage user accounts.",
                status_code=403,
            )
        return None

    def get_all_users(self) -> ServiceResult[list[User]]:
        """Fetch all users for the admin view."""
        return self._require_admin() or self._call("get_all_users", self._repo.list_all)

    def get_user(self, user_id: str) -> ServiceResult[User]:
        result = self._call("get_user", lambda: self._repo.get_by_id(user_id))
        if result.success and result.data is None:
            return ServiceResult(success=False, error="User not found.", status_code=404)
        return result

    def update_user(self, user_id: str, changes: dict[str, Any]) -> ServiceResult[User]:
        denied = self._require_admin()
        if denied:
            return denied
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            return self._invalid(f"Field(s) cannot be edited: {', '.join(unknown)}.")
        role = changes.get("role")
        if role is not None and role not in {r.value for r in UserRole}:
            return self._invalid(
                f"Invalid role specified: '{role}'. "
                f"Must be one of: {', '.join(r.value for r in UserRole)}."
            )
        result = self._call("update_user", lambda: self._repo.update(user_id, changes))
        if result.success:
            self._audit("USER_UPDATE", user_id, {k: str(v) for k, v in changes.items()})
        return result

    def set_active(self, user_id: str, active: bool) -> ServiceResult[User]:
        denied = self._require_admin()
        if denied:
            return denied
        current = self._session.current_user if self._session else None
        if not active and current is not None and current.id == user_id:
            return self._invalid("You cannot deactivate your own account.")
        fn = self._repo.activate if active else self._repo.deactivate
        result = self._call("set_user_active", lambda: fn(user_id))
        if result.success:
            self._audit("USER_ACTIVATE" if active else "USER_DEACTIVATE", user_id, {})
        return result

    def toggle_status(self, user_id: str) -> ServiceResult[User]:
        denied = self._require_admin()
        if denied:
            return denied
        return self._call("toggle_user_status", lambda: self._repo.toggle_status(user_id))

    def proponents_for_province(self, province: Optional[str] = None) -> ServiceResult[list[User]]:
        """Proponents in *province*, defaulting to the PSTO's own province."""
        user = self._session.current_user if self._session else None
        target = province or (user.province if user else None)
        if not target:
            return self._invalid("No province selected.")
        return self._call("proponents_for_province", lambda: self._repo.proponents_for_province(target))

    def _audit(self, action: str, user_id: str, details: dict[str, Any]) -> None:
        actor = self._session.current_user if self._session else None
        log_audit_event(
            self._logger,
            action=action,
            entity_type="User",
            entity_id=user_id,
            user_id=(actor.id if actor else None) or "unknown",
            details=details,
        )
