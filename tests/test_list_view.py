"""Tests for the list screen's background plumbing (no Tk window is created)."""

import io
import json

import pytest

pytest.importorskip("customtkinter")

from portal.logger import StructuredLogger  # noqa: E402
from portal.models.service_models import ServiceResult  # noqa: E402
from portal.ui.views.list_view import PortalListView, guarded_call  # noqa: E402


class FakeView:
    """Only what ``PortalListView._post`` touches."""

    def __init__(self):
        self.exists = True
        self.scheduled = []

    def after(self, delay, callback):
        self.scheduled.append(callback)
        return f"after#{len(self.scheduled)}"

    def winfo_exists(self):
        return self.exists

    def run_pending(self):
        pending, self.scheduled = self.scheduled, []
        for callback in pending:
            callback()


class TestGuardedCall:
    def test_result_passes_through(self, logger):
        result = ServiceResult(success=True, data=[1, 2])
        assert guarded_call("fetch", lambda: result, logger) is result

    def test_exception_becomes_failed_result(self):
        stream = io.StringIO()
        log = StructuredLogger(name="tests.list_view.guard", stream=stream, file_logging=False)

        def broken():
            raise UnicodeDecodeError("utf-8", b"\x80", 0, 1, "invalid start byte")

        result = guarded_call("fetch", broken, log)

        assert not result.success
        assert result.status_code == 500
        assert "fetch" in result.error
        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["level"] == "ERROR"
        assert entry["message"] == "Background fetch failed."


class TestPost:
    """Results are handed to the UI thread without bookkeeping."""

    def test_delivers_while_view_exists(self):
        view, seen = FakeView(), []
        PortalListView._post(view, seen.append, "result")
        view.run_pending()
        assert seen == ["result"]

    def test_dropped_after_view_is_destroyed(self):
        view, seen = FakeView(), []
        PortalListView._post(view, seen.append, "result")
        view.exists = False
        view.run_pending()
        assert seen == []

    def test_keeps_no_job_ids(self):
        view = FakeView()
        for _ in range(50):
            PortalListView._post(view, lambda: None)
        view.run_pending()
        assert not hasattr(view, "_pending_jobs")
        assert view.scheduled == []
