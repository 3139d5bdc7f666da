"""Tests for the workflow services and their ServiceResult contract."""

import pytest
import requests

from portal.models.application import ProgramApplication
from portal.models.document import DownloadedFile
from portal.models.enrollment import Enrollment
from portal.models.service_models import ServiceResult
from portal.models.tna import TnaRecord


@pytest.fixture
def psto(sign_in):
    return sign_in("psto")


class TestServiceResultMapping:
    """Client failures become ServiceResult status codes."""

    def test_success(self, services, http, psto):
        http.add("GET", "/enrollments", {"success": True, "enrollments": [{"_id": "e1", "status": "draft"}]})
        result = services["enrollment_service"].list_enrollments()
        assert result.success
        assert [e.id for e in result.data] == ["e1"]

    def test_filters_become_query_params(self, services, http, psto):
        http.add("GET", "/enrollments", {"success": True, "enrollments": []})
        services["enrollment_service"].list_enrollments(province="Romblon", status=None)
        assert http.calls[0]["params"] == {"province": "Romblon"}

    def test_unreachable_backend(self, services, http, psto):
        http.error = requests.ConnectionError("refused")
        result = services["enrollment_service"].list_enrollments()
        assert not result.success
        assert result.status_code == 0

    def test_success_false_is_bad_request(self, services, http, psto):
        http.add("GET", "/enrollments", {"success": False, "message": "Province is invalid"})
        result = services["enrollment_service"].list_enrollments()
        assert result.status_code == 400
        assert result.error == "Province is invalid"

    def test_http_status_is_kept(self, services, http, psto):
        http.add("GET", "/enrollments/e9", {"message": "Enrollment not found"}, status=404)
        result = services["enrollment_service"].get_enrollment("e9")
        assert result.status_code == 404

    def test_unexpected_shape(self, services, http, psto):
        http.add("GET", "/enrollments", {"success": True, "enrollments": [{"stageData": "oops"}]})
        result = services["enrollment_service"].list_enrollments()
        assert result.status_code == 502

    def test_not_signed_in(self, services, http):
        result = services["enrollment_service"].list_enrollments()
        assert result.status_code == 401
        assert http.calls == []


class TestEnrollmentStages:
    """Stage updates are gated on an approved TNA."""

    def test_locked_stage_refused_without_request(self, services, http, psto):
        enrollment = Enrollment(id="e1", status="submitted", tna_status="under_review")
        result = services["enrollment_service"].update_stage(enrollment, "rtec", completed=True)
        assert result.status_code == 403
        assert http.calls == []

    def test_tna_stage_always_open(self, services, http, psto):
        http.add("PATCH", "/enrollments/e1/stage", {"success": True, "enrollment": {"_id": "e1"}})
        enrollment = Enrollment(id="e1", status="submitted", tna_status="pending")
        result = services["enrollment_service"].update_stage(enrollment, "tna", completed=True)
        assert result.success
        assert http.calls[0]["json"] == {"stageId": "tna", "completed": True, "notes": ""}

    def test_later_stage_open_after_approval(self, services, http, psto):
        http.add("PATCH", "/enrollments/e1/stage", {"success": True, "enrollment": {"_id": "e1"}})
        enrollment = Enrollment(id="e1", status="approved", tna_status="approved")
        assert services["enrollment_service"].update_stage(enrollment, "funding", completed=True).success

    def test_status_view_logs_conflicts(self, services):
        enrollment = Enrollment.model_validate(
            {
                "id": "e1",
                "tna_status": "approved",
                "stage_data": [
                    {"stage_id": "rtec", "in_progress": True},
                    {"stage_id": "funding", "in_progress": True},
                ],
            }
        )
        view = services["enrollment_service"].build_status_view(enrollment)
        assert view.conflicts == ("rtec", "funding")


class TestTnaReview:
    def test_reject_requires_notes(self, services, http, sign_in):
        sign_in("dost_mimaropa")
        result = services["enrollment_service"].review_tna("e1", "rejected", "  ")
        assert result.status_code == 400
        assert http.calls == []

    def test_unknown_decision(self, services, http, sign_in):
        sign_in("dost_mimaropa")
        assert not services["enrollment_service"].review_tna("e1", "maybe").success

    def test_approve_sends_action(self, services, http, sign_in):
        sign_in("dost_mimaropa")
        http.add("POST", "/enrollments/e1/review-tna", {"success": True, "enrollment": {"_id": "e1"}})
        result = services["enrollment_service"].review_tna("e1", "approved")
        body = http.calls[0]["json"]
        assert result.success
        assert body["action"] == "approve"
        assert body["reviewedBy"] == "u-1"

    def test_submit_tna_checks_required_fields(self, services, http, psto):
        result = services["enrollment_service"].submit_tna("e1", {"affiliation": "DTI"}, {})
        assert result.status_code == 400
        assert "contact person" in result.error
        assert http.calls == []


class TestNotifications:
    """Role feeds, expiry filtering and unread counts."""

    FEED = {
        "success": True,
        "unreadCount": 5,
        "notifications": [
            {"_id": "n1", "title": "Old", "isRead": False, "expiresAt": "2000-01-01T00:00:00Z"},
            {"_id": "n2", "title": "New", "isRead": False, "expiresAt": "2999-01-01T00:00:00Z"},
            {"_id": "n3", "title": "Seen", "isRead": True},
        ],
    }

    def test_expired_are_hidden_and_count_recomputed(self, services, http, psto):
        http.add("GET", "/notifications/psto/u-1", self.FEED)
        feed = services["notification_service"].get_feed().data
        assert [n.id for n in feed.notifications] == ["n2", "n3"]
        assert feed.unread_count == 1

    def test_unread_count(self, services, http, psto):
        http.add("GET", "/notifications/psto/u-1", self.FEED)
        assert services["notification_service"].unread_count().data == 1
        assert http.calls[0]["params"]["unreadOnly"] == "true"

    @pytest.mark.parametrize(
        "role, segment",
        [
            ("proponent", "proponent"),
            ("dost_mimaropa", "dost"),
            ("super_admin", "dost"),
            ("auditor", "proponent"),
        ],
    )
    def test_feed_by_role(self, services, http, sign_in, role, segment):
        sign_in(role)
        services["notification_service"].get_feed()
        assert http.paths == [f"/notifications/{segment}/u-1"]

    def test_requires_user(self, services, http):
        assert services["notification_service"].get_feed().status_code == 401
        assert http.calls == []

    def test_mark_all_read(self, services, http, psto):
        http.add("PATCH", "/notifications/psto/u-1/mark-all-read", {"success": True})
        assert services["notification_service"].mark_all_read().success


class TestApplications:
    def test_psto_return_requires_comments(self, services, http, psto):
        result = services["application_service"].psto_review("a1", "returned")
        assert result.status_code == 400
        assert http.calls == []

    def test_psto_unknown_decision(self, services, http, psto):
        assert services["application_service"].psto_review("a1", "pending").status_code == 400

    def test_resubmit_only_returned(self, services, http, sign_in):
        sign_in("proponent")
        application = ProgramApplication(id="a1", status="pending")
        assert services["application_service"].resubmit(application).status_code == 400
        assert http.calls == []

    def test_unknown_program(self, services, http, sign_in):
        sign_in("proponent")
        result = services["application_service"].submit_application("XYZ", {"enterprise_name": "Co."})
        assert result.error == "Unknown program 'XYZ'."


class TestTnaWorkflow:
    def test_start_requires_scheduled(self, services, http, psto):
        tna = TnaRecord(id="t1", status="completed")
        assert services["tna_service"].mark_in_progress(tna).status_code == 400

    def test_forward_requires_report(self, services, http, psto):
        tna = TnaRecord(id="t1", status="completed")
        assert services["tna_service"].forward_to_dost(tna).status_code == 400
        assert http.calls == []

    def test_report_review_requires_comments(self, services, http, sign_in):
        sign_in("dost_mimaropa")
        assert services["tna_service"].review_report("t1", "rejected").status_code == 400

    def test_upload_missing_file(self, services, http, psto, tmp_path):
        result = services["tna_service"].upload_report("t1", tmp_path / "missing.pdf")
        assert result.status_code == 400
        assert http.calls == []


class TestUsers:
    def test_user_list_is_admin_only(self, services, http, psto):
        result = services["user_service"].get_all_users()
        assert result.status_code == 403
        assert http.calls == []


class TestDocuments:
    def test_save_download(self, services, config):
        file = DownloadedFile(filename="report.pdf", content=b"%PDF")
        result = services["document_service"].save_download(file)
        assert result.data == config.DOWNLOAD_DIR / "report.pdf"
        assert result.data.read_bytes() == b"%PDF"

    def test_open_downloaded_uses_os_handler(self, services, config, monkeypatch):
        opened = []

        def fake_open(path):
            opened.append(path)
            return ServiceResult(success=True, data=path)

        monkeypatch.setattr(services["native_opener_service"], "open_file", fake_open)
        result = services["document_service"].open_downloaded(
            DownloadedFile(filename="letter.docx", content=b"x"),
        )
        assert result.success
        assert opened == [config.DOWNLOAD_DIR / "letter.docx"]


class TestNativeOpener:
    def _service(self, logger, launched):
        from portal.services.native_opener import NativeOpenerService

        return NativeOpenerService(logger, launcher=launched.append)

    def test_missing_file(self, logger, tmp_path):
        launched = []
        result = self._service(logger, launched).open_file(tmp_path / "gone.pdf")
        assert result.status_code == 404
        assert launched == []

    def test_launches_existing_file(self, logger, tmp_path):
        target = tmp_path / "report.pdf"
        target.write_bytes(b"%PDF")
        launched = []
        assert self._service(logger, launched).open_file(target).success
        assert launched == [target]

    def test_handler_failure_reports_saved_location(self, logger, tmp_path):
        from portal.services.native_opener import NativeOpenerService

        target = tmp_path / "report.xyz"
        target.write_bytes(b"x")

        def broken(path):
            raise FileNotFoundError("xdg-open")

        result = NativeOpenerService(logger, launcher=broken).open_file(target)
        assert result.status_code == 500
        assert str(target) in result.error
