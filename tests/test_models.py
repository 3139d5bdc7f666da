"""Tests for model parsing, envelope payload lookup and key normalisation."""

from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from portal.models.enrollment import Enrollment
from portal.models.envelope import ApiEnvelope
from portal.models.notification import Notification
from portal.models.user import User
from portal.models.enums import StageId
from portal.utils.general import convert_to_json_safe, file_part, format_date, safe_filename
from portal.utils.string_helpers import denormalize_keys, normalize_keys, to_camel_case, to_snake_case


class TestKeyNormalisation:
    def test_snake_case(self):
        assert to_snake_case("tnaStatus") == "tna_status"
        assert to_snake_case("forwardedToPSTO") == "forwarded_to_psto"
        assert to_snake_case("_id") == "_id"

    def test_camel_case(self):
        assert to_camel_case("review_notes") == "reviewNotes"
        assert to_camel_case("status") == "status"

    def test_nested(self):
        raw = {"stageData": [{"stageId": "tna", "inProgress": True}]}
        assert normalize_keys(raw) == {"stage_data": [{"stage_id": "tna", "in_progress": True}]}
        assert denormalize_keys(normalize_keys(raw)) == raw


class TestEnvelope:
    def test_named_payload(self):
        envelope = ApiEnvelope.model_validate({"success": True, "meetings": [1, 2]})
        assert envelope.payload("meetings") == [1, 2]
        assert envelope.payload("data") is None

    def test_first_known_payload_key(self):
        envelope = ApiEnvelope.model_validate({"success": True, "count": 3, "applications": ["a"]})
        assert envelope.payload() == ["a"]

    def test_defaults(self):
        envelope = ApiEnvelope.model_validate({})
        assert envelope.success
        assert envelope.payload() is None


class TestDocuments:
    def test_mongo_id(self):
        user = User.model_validate({"_id": "abc", "email": "x@y.z", "role": "psto"})
        assert user.id == "abc"

    def test_full_name_fallbacks(self):
        assert User(email="x@y.z", first_name="Ana", last_name="Cruz").full_name == "Ana Cruz"
        assert User(email="x@y.z", name="Ana C.").full_name == "Ana C."
        assert User(email="x@y.z").full_name == "x@y.z"

    def test_unknown_role_is_kept(self):
        assert User(email="x@y.z", role="auditor").role == "auditor"

    def test_enrollment_from_camel_case(self):
        raw = {
            "_id": "e1",
            "status": "approved",
            "tnaStatus": "approved",
            "stageData": [{"stageId": "tna", "completed": True}],
            "customer": {"enterpriseName": "Romblon Marble Co."},
        }
        enrollment = Enrollment.model_validate(normalize_keys(raw))
        assert enrollment.tna_status == "approved"
        assert enrollment.stage_data[0].completed
        assert enrollment.customer_name == "Romblon Marble Co."


class TestNotificationExpiry:
    NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_no_expiry(self):
        assert not Notification(title="t").is_expired(self.NOW)

    def test_past_expiry(self):
        notification = Notification(title="t", expires_at=self.NOW - timedelta(minutes=1))
        assert notification.is_expired(self.NOW)

    def test_future_expiry(self):
        notification = Notification(title="t", expires_at=self.NOW + timedelta(days=1))
        assert not notification.is_expired(self.NOW)

    def test_naive_timestamps_are_utc(self):
        notification = Notification(title="t", expires_at=datetime(2026, 3, 1, 11, 0))
        assert notification.is_expired(self.NOW)


class TestFormatting:
    def test_format_date(self):
        value = datetime(2025, 9, 22, 23, 6)
        assert format_date(value) == "September 22, 2025, 11:06 PM"
        assert format_date(value, with_time=False) == "September 22, 2025"
        assert format_date(None) == "-"

    def test_safe_filename(self):
        assert safe_filename('TNA: "final"?.pdf') == "TNA_ _final__.pdf"
        assert safe_filename("...", fallback="report.pdf") == "report.pdf"

    def test_json_safe_body(self):
        body = {
            "stage": StageId.RTEC,
            "scheduled": date(2025, 10, 1),
            "path": Path("reports") / "tna.pdf",
            "tags": ("a", "b"),
            "count": 3,
        }
        assert convert_to_json_safe(body) == {
            "stage": "rtec",
            "scheduled": "2025-10-01",
            "path": "reports/tna.pdf",
            "tags": ["a", "b"],
            "count": 3,
        }

    def test_file_part(self, tmp_path):
        report = tmp_path / "report.pdf"
        report.write_bytes(b"%PDF")
        assert file_part(report) == ("report.pdf", b"%PDF", "application/pdf")
