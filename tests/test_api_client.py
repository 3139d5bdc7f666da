"""Tests for the REST client: auth header, 401 handling, envelopes, downloads."""

import pytest
import requests

from portal.api_client import (
    ApiConnectionError,
    ApiError,
    NotAuthenticatedError,
    SessionExpiredError,
)


@pytest.fixture
def stored_token(token_store, raw_user):
    token_store.save("tok-abc", raw_user())
    return "tok-abc"


class TestAuthentication:
    """Bearer token handling."""

    def test_sends_bearer_token(self, api, http, stored_token):
        http.add("GET", "/enrollments", {"success": True, "enrollments": []})
        api.get("/enrollments")
        assert http.calls[0]["headers"]["Authorization"] == "Bearer tok-abc"

    def test_missing_token_never_hits_network(self, api, http):
        with pytest.raises(NotAuthenticatedError) as excinfo:
            api.get("/enrollments")
        assert excinfo.value.message == "Please login first"
        assert http.calls == []

    def test_unauthenticated_call_has_no_header(self, api, http):
        http.add("POST", "/auth/forgot-password", {"success": True, "message": "sent"})
        api.post("/auth/forgot-password", json={"email": "a@b.co"}, auth=False)
        assert "Authorization" not in http.calls[0]["headers"]

    def test_401_wipes_store(self, api, http, token_store, stored_token):
        http.add("GET", "/enrollments", {"message": "jwt expired"}, status=401)
        with pytest.raises(SessionExpiredError) as excinfo:
            api.get("/enrollments")
        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "jwt expired"
        assert token_store.get_token() is None
        assert not token_store.is_logged_in


class TestEnvelope:
    """Response envelope parsing."""

    def test_payload_by_key(self, api, http, stored_token):
        http.add("GET", "/tna/list", {"success": True, "data": [{"_id": "t1"}]})
        assert api.get("/tna/list").payload() == [{"_id": "t1"}]

    def test_bare_list_is_wrapped(self, api, http, stored_token):
        http.add("GET", "/rtec-meetings", [{"_id": "m1"}])
        assert api.get("/rtec-meetings").payload("data") == [{"_id": "m1"}]

    def test_success_false_raises(self, api, http, stored_token):
        http.add("POST", "/enrollments/create", {"success": False, "message": "Duplicate enrollment"})
        with pytest.raises(ApiError) as excinfo:
            api.post("/enrollments/create", json={})
        assert excinfo.value.message == "Duplicate enrollment"
        assert excinfo.value.status_code == 200

    def test_error_status_carries_backend_message(self, api, http, stored_token):
        http.add("DELETE", "/enrollments/e1", {"error": "Not allowed"}, status=403)
        with pytest.raises(ApiError) as excinfo:
            api.delete("/enrollments/e1")
        assert excinfo.value.status_code == 403
        assert excinfo.value.message == "Not allowed"

    def test_error_status_without_body(self, api, http, stored_token):
        http.add("GET", "/enrollments/stats", None, status=500)
        with pytest.raises(ApiError, match="status 500"):
            api.get("/enrollments/stats")

    def test_non_json_success_body(self, api, http, stored_token):
        http.add("GET", "/enrollments", None, status=200)
        with pytest.raises(ApiError, match="Invalid response"):
            api.get("/enrollments")

    def test_connection_error(self, api, http, stored_token):
        http.error = requests.ConnectionError("refused")
        with pytest.raises(ApiConnectionError):
            api.get("/enrollments")

    def test_timeout_is_connection_error(self, api, http, stored_token, config):
        http.error = requests.Timeout("slow")
        with pytest.raises(ApiConnectionError):
            api.get("/enrollments")
        assert http.calls[0]["timeout"] == config.REQUEST_TIMEOUT_S


class TestUrls:
    def test_trailing_slash_is_stripped(self, api):
        assert api.url("/tna/list") == "http://portal.test/api/tna/list"
        assert api.url("tna/list") == "http://portal.test/api/tna/list"

    def test_close_closes_session(self, api, http):
        api.close()
        assert http.closed


class TestDownload:
    """Binary downloads."""

    def test_filename_from_disposition(self, api, http, stored_token):
        http.add(
            "GET",
            "/tna/t1/download-report",
            None,
            headers={
                "Content-Type": "application/pdf; charset=binary",
                "Content-Disposition": 'attachment; filename="TNA Report.pdf"',
            },
            content=b"%PDF-1.4",
        )
        file = api.download("/tna/t1/download-report", fallback_name="report.pdf")
        assert file.filename == "TNA Report.pdf"
        assert file.content == b"%PDF-1.4"
        assert file.content_type == "application/pdf"

    def test_unsafe_filename_is_sanitised(self, api, http, stored_token):
        http.add(
            "GET",
            "/documents/d1/download",
            None,
            headers={"Content-Disposition": "attachment; filename=../../etc/passwd"},
            content=b"x",
        )
        file = api.download("/documents/d1/download")
        assert "/" not in file.filename
        assert file.content_type == "application/octet-stream"

    def test_fallback_name(self, api, http, stored_token):
        http.add("GET", "/documents/d2/download", None, content=b"x")
        assert api.download("/documents/d2/download", fallback_name="letter.docx").filename == "letter.docx"
