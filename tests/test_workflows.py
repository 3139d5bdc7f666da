"""Tests for RTEC meetings, TNA scheduling and project-document requests."""

from datetime import date

import pytest

from portal.models.enums import DocumentKind


@pytest.fixture
def dost(sign_in):
    return sign_in("dost_mimaropa")


@pytest.fixture
def rtec(services):
    return services["rtec_service"]


MEETING = {"success": True, "data": {"_id": "m1", "meetingTitle": "RTEC for Acme", "status": "scheduled"}}


class TestRtecMeetingCreation:
    """Field checks run before any request is sent."""

    def test_title_required(self, rtec, http, dost):
        result = rtec.create_meeting("t1", "  ", date(2025, 10, 1), "09:00", "DOST Office")
        assert result.status_code == 400
        assert http.calls == []

    def test_date_time_location_required(self, rtec, http, dost):
        result = rtec.create_meeting("t1", "RTEC", date(2025, 10, 1), "09:00", "")
        assert result.error == "Date, time and location are required."
        assert http.calls == []

    def test_unknown_meeting_type(self, rtec, http, dost):
        result = rtec.create_meeting(
            "t1", "RTEC", date(2025, 10, 1), "09:00", "Online", meeting_type="telepathic",
        )
        assert result.error == "Unknown meeting type 'telepathic'."
        assert http.calls == []

    @pytest.mark.parametrize("meeting_type", ["virtual", "hybrid"])
    def test_online_meetings_need_a_link(self, rtec, http, dost, meeting_type):
        result = rtec.create_meeting(
            "t1", "RTEC", date(2025, 10, 1), "09:00", "Online", meeting_type=meeting_type,
        )
        assert result.status_code == 400
        assert "meeting link" in result.error
        assert http.calls == []

    def test_creates_meeting(self, rtec, http, dost):
        http.add("POST", "/rtec-meetings/create", MEETING)
        result = rtec.create_meeting(
            "t1",
            " RTEC for Acme ",
            date(2025, 10, 1),
            "09:00",
            "Online",
            meeting_type="virtual",
            virtual_meeting_link="https://meet.example/abc",
        )
        assert result.success
        assert result.data.id == "m1"
        assert result.data.meeting_title == "RTEC for Acme"
        assert http.calls[0]["json"] == {
            "tnaId": "t1",
            "meetingTitle": "RTEC for Acme",
            "scheduledDate": "2025-10-01",
            "scheduledTime": "09:00",
            "location": "Online",
            "meetingType": "virtual",
            "virtualMeetingLink": "https://meet.example/abc",
        }


class TestRtecMeetingLifecycle:
    def test_cancel_patches_status(self, rtec, http, dost):
        http.add("PATCH", "/rtec-meetings/m1/status", MEETING)
        assert rtec.cancel_meeting("m1").success
        assert http.paths == ["/rtec-meetings/m1/status"]
        assert http.calls[0]["json"] == {"status": "cancelled"}

    def test_update_status(self, rtec, http, dost):
        http.add("PATCH", "/rtec-meetings/m1/status", MEETING)
        assert rtec.update_status("m1", "completed").success
        assert http.calls[0]["json"] == {"status": "completed"}

    def test_unknown_status(self, rtec, http, dost):
        assert rtec.update_status("m1", "adjourned").status_code == 400
        assert http.calls == []

    def test_reschedule_puts_new_slot(self, rtec, http, dost):
        http.add("PUT", "/rtec-meetings/m1", MEETING)
        assert rtec.reschedule_meeting("m1", date(2025, 11, 3), " 13:30 ").success
        assert http.calls[0]["json"] == {
            "scheduledDate": "2025-11-03",
            "scheduledTime": "13:30",
            "status": "scheduled",
        }

    def test_reschedule_requires_time(self, rtec, http, dost):
        assert rtec.reschedule_meeting("m1", date(2025, 11, 3), "").status_code == 400
        assert http.calls == []

    def test_missing_meeting(self, rtec, http, dost):
        http.add("GET", "/rtec-meetings/m9", {"success": True})
        assert rtec.get_meeting("m9").status_code == 404


class TestRtecParticipants:
    def test_list(self, rtec, http, dost):
        http.add(
            "GET",
            "/rtec-meetings/m1/participants",
            {"success": True, "data": [{"name": "Ana Cruz", "status": "confirmed"}]},
        )
        participants = rtec.participants("m1").data
        assert [p.name for p in participants] == ["Ana Cruz"]

    def test_add(self, rtec, http, dost):
        http.add("POST", "/rtec-meetings/m1/participants", MEETING)
        assert rtec.add_participant("m1", "u-7").success
        assert http.calls[0]["json"] == {"userId": "u-7", "role": "member"}

    def test_remove(self, rtec, http, dost):
        http.add("DELETE", "/rtec-meetings/m1/participants/p1", {"success": True})
        assert rtec.remove_participant("m1", "p1").success

    def test_decline_invitation(self, rtec, http, sign_in):
        sign_in("proponent")
        http.add("PATCH", "/rtec-meetings/m1/participants/me", MEETING)
        assert rtec.respond_to_invitation("m1", accept=False).success
        assert http.calls[0]["json"] == {"status": "declined"}

    def test_invite_psto(self, rtec, http, dost):
        http.add("POST", "/rtec-meetings/m1/invite-psto", {"success": True, "message": "Invitation sent"})
        result = rtec.invite_psto("m1", "p-9")
        assert result.data == "Invitation sent"
        assert http.calls[0]["json"] == {"pstoId": "p-9"}


class TestTnaScheduling:
    def test_schedules_visit(self, services, http, sign_in):
        sign_in("psto")
        http.add("POST", "/tna/schedule", {"success": True, "tna": {"_id": "t1", "status": "scheduled"}})
        result = services["tna_service"].schedule(
            "a1", "p1", date(2025, 10, 1), " 09:00 ", " Odiongan ", contact_person="Juan",
        )
        assert result.success
        assert result.data.id == "t1"
        assert http.calls[0]["json"] == {
            "applicationId": "a1",
            "proponentId": "p1",
            "scheduledDate": "2025-10-01",
            "scheduledTime": "09:00",
            "location": "Odiongan",
            "contactPerson": "Juan",
        }

    def test_location_required(self, services, http, sign_in):
        sign_in("psto")
        result = services["tna_service"].schedule("a1", "p1", date(2025, 10, 1), "09:00", " ")
        assert result.status_code == 400
        assert http.calls == []


class TestProjectDocuments:
    """RTEC, funding and refund requests share one workflow."""

    REQUEST = {"success": True, "data": {"_id": "d1", "tnaId": "t1", "status": "documents_requested"}}

    def test_request(self, services, http, dost):
        http.add("POST", "/rtec-documents/request/t1", self.REQUEST)
        result = services["document_service"].request_documents(DocumentKind.RTEC, "t1", due_date="2025-10-15")
        assert result.success
        assert result.data.status == "documents_requested"
        assert http.calls[0]["json"] == {"dueDate": "2025-10-15"}

    def test_submit_sends_type_as_form_data(self, services, http, sign_in, tmp_path):
        sign_in("proponent")
        permit = tmp_path / "permit.pdf"
        permit.write_bytes(b"%PDF")
        http.add("POST", "/funding-documents/submit/t1", self.REQUEST)

        result = services["document_service"].submit_document(
            DocumentKind.FUNDING, "t1", "business_permit", permit,
        )

        assert result.success
        assert http.calls[0]["data"] == {"documentType": "business_permit"}
        assert http.calls[0]["files"] == {"document": ("permit.pdf", b"%PDF", "application/pdf")}

    def test_submit_requires_type(self, services, http, sign_in, tmp_path):
        sign_in("proponent")
        result = services["document_service"].submit_document(DocumentKind.FUNDING, "t1", "", tmp_path / "x.pdf")
        assert result.status_code == 400
        assert http.calls == []

    def test_reject_sends_action_and_comments(self, services, http, dost):
        http.add("POST", "/refund-documents/review/t1", self.REQUEST)
        result = services["document_service"].review_document(
            DocumentKind.REFUND, "t1", "receipt", "rejected", " Blurry scan ",
        )
        assert result.success
        assert http.calls[0]["json"] == {"documentType": "receipt", "action": "reject", "comments": "Blurry scan"}

    def test_reject_requires_comments(self, services, http, dost):
        result = services["document_service"].review_document(DocumentKind.REFUND, "t1", "receipt", "rejected")
        assert result.status_code == 400
        assert http.calls == []

    def test_unknown_decision(self, services, http, dost):
        result = services["document_service"].review_document(DocumentKind.RTEC, "t1", "receipt", "returned")
        assert result.status_code == 400
        assert http.calls == []
