"""Role-Aware Module Registry.

``main.py`` registers each portal screen once, with the roles allowed
to open it.  After login the shell asks for the signed-in role's
modules (sidebar order = registration order) and for the module to
open first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import customtkinter as ctk

from portal.logger import StructuredLogger
from portal.models.enums import UserRole

ViewFactory = Callable[[ctk.CTkFrame], ctk.CTkFrame]


@dataclass(frozen=True)
class ModuleEntry:
    """One sidebar destination.

    ``factory`` builds the module's frame inside the shell's content
    area the first time it is opened.  ``roles`` of ``None`` means any
    signed-in user, including roles this client does not know.
    """

    module_id: str
    display_name: str
    icon: str
    factory: ViewFactory
    roles: Optional[frozenset[str]] = None

    def allows(self, role: Optional[str]) -> bool:
        if role is None:
            return False
        if self.roles is None or role == UserRole.SUPER_ADMIN:
            return True
        return role in self.roles


class ModuleRegistry:
    """Ordered collection of ``ModuleEntry`` keyed by ``module_id``."""

    def __init__(self, logger: StructuredLogger) -> None:
        self._logger = logger
        self._modules: dict[str, ModuleEntry] = {}
        self._preferred: Optional[str] = None

    def register(
        self,
        module_id: str,
        display_name: str,
        icon: str,
        factory: ViewFactory,
        required_roles: Optional[frozenset[str]] = None,
        *,
        default: bool = False,
    ) -> None:
        """Add a module.

        ``default=True`` marks the module opened after login for roles
        allowed to see it; everyone else lands on their first module.
        Re-registering an id replaces the earlier entry in place.
        """
        if module_id in self._modules:
            self._logger.warning("Module '%s' registered twice; keeping the later one.", module_id)
        self._modules[module_id] = ModuleEntry(
            module_id, display_name, icon, factory, required_roles,
        )
        if default:
            self._preferred = module_id
        self._logger.debug(
            "Module registered: %s",
            module_id,
            extra={"roles": "all" if required_roles is None else ",".join(sorted(required_roles))},
        )

    def get_modules_for_role(self, role: Optional[str]) -> list[ModuleEntry]:
        return [entry for entry in self._modules.values() if entry.allows(role)]

    def get_module(self, module_id: str) -> ModuleEntry:
        """Raises ``KeyError`` for an unknown id."""
        try:
            return self._modules[module_id]
        except KeyError:
            raise KeyError(f"Module '{module_id}' is not registered.") from None

    def default_module_for_role(self, role: Optional[str]) -> str:
        """Id of the module to open after login, ``""`` when *role* sees none."""
        preferred = self._modules.get(self._preferred or "")
        if preferred is not None and preferred.allows(role):
            return preferred.module_id
        visible = self.get_modules_for_role(role)
        return visible[0].module_id if visible else ""

    @property
    def default_module_id(self) -> str:
        """The module registered with ``default=True``; the first one otherwise."""
        if self._preferred:
            return self._preferred
        return next(iter(self._modules), "")
