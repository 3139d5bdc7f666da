"""Tests for login, logout, session restore and registration."""

import requests

from portal.models.auth_models import AuthErrorCode


class TestLogin:
    """AuthService.login against a scripted backend."""

    def test_success_persists_session(self, services, http, session, token_store, raw_user):
        http.add("POST", "/auth/login", {"success": True, "token": "tok-9", "user": raw_user("psto")})
        result = services["auth_service"].login("  Maria@Example.com ", "secret1")

        assert result.success
        assert result.role == "psto"
        assert result.full_name == "Maria Santos"
        assert http.calls[0]["json"] == {"email": "maria@example.com", "password": "secret1"}
        assert "Authorization" not in http.calls[0]["headers"]
        assert token_store.get_token() == "tok-9"
        assert token_store.get_user()["firstName"] == "Maria"
        assert session.current_user.id == "u-1"

    def test_invalid_email_skips_network(self, services, http):
        result = services["auth_service"].login("not-an-email", "secret1")
        assert result.error_code == AuthErrorCode.VALIDATION_ERROR
        assert http.calls == []

    def test_missing_password(self, services, http):
        result = services["auth_service"].login("maria@example.com", "")
        assert result.error_code == AuthErrorCode.VALIDATION_ERROR
        assert http.calls == []

    def test_rejected_credentials(self, services, http, session):
        http.add("POST", "/auth/login", {"success": False, "message": "Invalid credentials"}, status=401)
        result = services["auth_service"].login("maria@example.com", "wrong")
        assert result.error_code == AuthErrorCode.INVALID_CREDENTIALS
        assert result.error_message == "Invalid credentials"
        assert not session.is_authenticated

    def test_network_failure(self, services, http):
        http.error = requests.ConnectionError("refused")
        result = services["auth_service"].login("maria@example.com", "secret1")
        assert result.error_code == AuthErrorCode.NETWORK_ERROR

    def test_response_without_token(self, services, http, raw_user):
        http.add("POST", "/auth/login", {"success": True, "user": raw_user()})
        result = services["auth_service"].login("maria@example.com", "secret1")
        assert not result.success


class TestSessionLifecycle:
    def test_restore_saved_session(self, services, session, token_store, raw_user):
        token_store.save("tok-1", raw_user("dost_mimaropa"))
        result = services["auth_service"].restore_session()
        assert result.success
        assert session.role == "dost_mimaropa"

    def test_restore_without_saved_session(self, services, session):
        result = services["auth_service"].restore_session()
        assert result.error_code == AuthErrorCode.SESSION_EXPIRED
        assert not session.is_authenticated

    def test_logout_clears_everything_and_notifies(self, services, session, token_store, sign_in):
        sign_in("psto")
        seen = []
        session.add_listener(seen.append)

        services["auth_service"].logout()

        assert seen == [None]
        assert not session.is_authenticated
        assert not token_store.is_logged_in

    def test_401_on_any_call_ends_session(self, services, http, session, token_store, sign_in):
        sign_in("psto")
        http.add("GET", "/enrollments", {"message": "jwt expired"}, status=401)

        result = services["enrollment_service"].list_enrollments()

        assert result.status_code == 401
        assert result.session_expired
        assert not session.is_authenticated
        assert token_store.get_token() is None


class TestRegistration:
    def test_password_mismatch(self, services, http):
        result = services["auth_service"].register("Ana", "Cruz", "ana@example.com", "secret1", "secret2")
        assert result.error_message == "Passwords do not match."
        assert http.calls == []

    def test_short_password(self, services, http):
        result = services["auth_service"].register("Ana", "Cruz", "ana@example.com", "abc", "abc")
        assert result.error_code == AuthErrorCode.VALIDATION_ERROR
        assert http.calls == []

    def test_control_characters_in_name(self, services, http):
        result = services["auth_service"].register("An\na", "Cruz", "ana@example.com", "secret1", "secret1")
        assert result.error_code == AuthErrorCode.VALIDATION_ERROR

    def test_creates_proponent(self, services, http, session):
        http.add("POST", "/users/create", {"success": True, "user": {"_id": "new-1"}})
        result = services["auth_service"].register(
            "Ana", "Cruz", "Ana@Example.com", "secret1", "secret1", province="Palawan",
        )
        body = http.calls[0]["json"]
        assert result.success
        assert result.user_id == "new-1"
        assert body["firstName"] == "Ana"
        assert body["email"] == "ana@example.com"
        assert body["role"] == "proponent"
        assert body["province"] == "Palawan"
        assert not session.is_authenticated

    def test_duplicate_email(self, services, http):
        http.add("POST", "/users/create", {"success": False, "message": "Email already exists"}, status=409)
        result = services["auth_service"].register("Ana", "Cruz", "ana@example.com", "secret1", "secret1")
        assert result.error_code == AuthErrorCode.VALIDATION_ERROR
        assert result.error_message == "Email already exists"


class TestPasswordReset:
    def test_forgot_password(self, services, http):
        http.add("POST", "/auth/forgot-password", {"success": True, "message": "Reset link sent"})
        result = services["auth_service"].forgot_password("ana@example.com")
        assert result.success
        assert result.message == "Reset link sent"

    def test_reset_requires_matching_passwords(self, services, http):
        result = services["auth_service"].reset_password("tok", "secret1", "secret9")
        assert not result.success
        assert http.calls == []
