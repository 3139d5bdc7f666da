"""Tests for role-based module visibility and the post-login default."""

import pytest

pytest.importorskip("customtkinter")

from portal.ui.module_registry import ModuleRegistry  # noqa: E402

STAFF = frozenset({"psto", "dost_mimaropa", "super_admin"})


@pytest.fixture
def registry(logger):
    registry = ModuleRegistry(logger=logger)
    registry.register("applications", "Applications", "A", lambda parent: parent, frozenset({"proponent", "psto"}))
    registry.register("enrollments", "Enrollments", "E", lambda parent: parent, STAFF, default=True)
    registry.register("tna_queue", "TNA Queue", "T", lambda parent: parent, STAFF)
    registry.register("notifications", "Notifications", "N", lambda parent: parent)
    return registry


class TestModuleRegistry:
    """Sidebar contents per role."""

    def _ids(self, registry, role):
        return [entry.module_id for entry in registry.get_modules_for_role(role)]

    def test_proponent_modules(self, registry):
        assert self._ids(registry, "proponent") == ["applications", "notifications"]

    def test_psto_modules(self, registry):
        assert self._ids(registry, "psto") == ["applications", "enrollments", "tna_queue", "notifications"]

    def test_super_admin_sees_everything(self, registry):
        assert len(self._ids(registry, "super_admin")) == 4

    def test_unknown_role_sees_shared_modules_only(self, registry):
        assert self._ids(registry, "auditor") == ["notifications"]
        assert self._ids(registry, "dost_mimaropa") == ["enrollments", "tna_queue", "notifications"]

    def test_default_module(self, registry):
        assert registry.default_module_id == "enrollments"
        assert registry.default_module_for_role("psto") == "enrollments"
        assert registry.default_module_for_role("proponent") == "applications"
        assert registry.default_module_for_role("auditor") == "notifications"

    def test_unregistered_module(self, registry):
        with pytest.raises(KeyError):
            registry.get_module("reports")

    def test_no_visible_modules(self, logger):
        registry = ModuleRegistry(logger=logger)
        registry.register("enrollments", "Enrollments", "E", lambda parent: parent, STAFF)
        assert registry.default_module_for_role("proponent") == ""


class TestSidebarHelpers:
    def test_role_label(self):
        from portal.ui.sidebar import role_label

        assert role_label("dost_mimaropa") == "DOST-MIMAROPA"
        assert role_label("psto") == "PSTO"
        assert role_label("regional_auditor") == "Regional Auditor"

    def test_initials(self):
        from portal.ui.sidebar import initials

        assert initials("Maria Dela Cruz") == "MC"
        assert initials("maria") == "M"
        assert initials("  ") == "?"
