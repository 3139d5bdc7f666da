"""Tests for the persisted session store."""

import json
import platform
import stat

import pytest


class TestTokenStore:
    """Save / load / clear round trips against a temp file."""

    def test_empty_store(self, token_store):
        assert token_store.get_token() is None
        assert token_store.get_user() is None
        assert not token_store.is_logged_in

    def test_save_uses_browser_keys(self, token_store, raw_user):
        token_store.save("tok-1", raw_user())
        on_disk = json.loads(token_store.path.read_text(encoding="utf-8"))
        assert on_disk["authToken"] == "tok-1"
        assert on_disk["isLoggedIn"] is True
        assert on_disk["userData"]["email"] == "maria@example.com"

    def test_is_logged_in(self, token_store, raw_user):
        token_store.save("tok-1", raw_user())
        assert token_store.is_logged_in
        assert token_store.get_token() == "tok-1"

    @pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
    def test_file_is_private(self, token_store, raw_user):
        token_store.save("tok-1", raw_user())
        mode = stat.S_IMODE(token_store.path.stat().st_mode)
        assert mode == 0o600

    def test_clear_removes_everything(self, token_store, raw_user):
        token_store.save("tok-1", raw_user())
        token_store.clear()
        assert not token_store.path.exists()
        assert token_store.get_token() is None
        assert token_store.get_user() is None

    def test_clear_is_idempotent(self, token_store):
        token_store.clear()
        token_store.clear()
        assert not token_store.is_logged_in

    def test_corrupt_file_reads_as_logged_out(self, token_store):
        token_store.path.parent.mkdir(parents=True, exist_ok=True)
        token_store.path.write_text("{not json", encoding="utf-8")
        assert not token_store.is_logged_in
        assert token_store.get_token() is None

    def test_flag_without_token_is_logged_out(self, token_store):
        token_store.path.parent.mkdir(parents=True, exist_ok=True)
        token_store.path.write_text(json.dumps({"isLoggedIn": True}), encoding="utf-8")
        assert not token_store.is_logged_in

    def test_update_user_keeps_token(self, token_store, raw_user):
        token_store.save("tok-1", raw_user())
        token_store.update_user(raw_user(firstName="Ana"))
        assert token_store.get_token() == "tok-1"
        assert token_store.get_user()["firstName"] == "Ana"

    def test_update_user_without_token_is_noop(self, token_store, raw_user):
        token_store.update_user(raw_user())
        assert not token_store.path.exists()

    def test_undecodable_file_reads_as_logged_out(self, token_store):
        token_store.path.parent.mkdir(parents=True, exist_ok=True)
        token_store.path.write_bytes(b"\x80garbage")
        assert token_store.get_token() is None
        assert token_store.get_user() is None
        assert not token_store.is_logged_in


class TestUndecodableSessionFile:
    """Services keep their ServiceResult contract when the store is unreadable."""

    @pytest.fixture(autouse=True)
    def _garbage(self, token_store):
        token_store.path.parent.mkdir(parents=True, exist_ok=True)
        token_store.path.write_bytes(b"\x80garbage")

    def test_authenticated_call_reports_not_signed_in(self, services, http):
        result = services["notification_service"].mark_read("n1")
        assert result.status_code == 401
        assert http.calls == []

    def test_restore_session_finds_nothing(self, services, session):
        result = services["auth_service"].restore_session()
        assert not result.success
        assert not session.is_authenticated
