"""Tests for the JSON log format."""

import io
import json
import logging

from portal.logger import JSONFormatter, StructuredLogger


def _record(**extra):
    record = logging.makeLogRecord({"name": "portal.api", "levelname": "INFO", "msg": "GET %s", "args": ("/tna/list",)})
    record.__dict__.update(extra)
    return record


class TestJSONFormatter:
    def test_core_fields(self):
        entry = json.loads(JSONFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger_name"] == "portal.api"
        assert entry["message"] == "GET /tna/list"
        assert "extra" not in entry

    def test_extra_fields_keep_json_types(self):
        entry = json.loads(JSONFormatter().format(_record(event="LOGIN", attempt=2)))
        assert entry["extra"] == {"event": "LOGIN", "attempt": 2}

    def test_credentials_are_masked(self):
        entry = json.loads(
            JSONFormatter().format(_record(auth_token="tok-1", password="pw", Authorization="Bearer x"))
        )
        assert set(entry["extra"].values()) == {"***"}


class TestStructuredLogger:
    def test_writes_json_lines(self):
        stream = io.StringIO()
        log = StructuredLogger(name="tests.logger.stream", stream=stream, file_logging=False)
        log.info("Session stored for user %s.", "a@b.co", extra={"event": "LOGIN"})
        entry = json.loads(stream.getvalue().splitlines()[-1])
        assert entry["message"] == "Session stored for user a@b.co."
        assert entry["extra"]["event"] == "LOGIN"

    def test_child_shares_handlers(self):
        stream = io.StringIO()
        log = StructuredLogger(name="tests.logger.parent", stream=stream, file_logging=False)
        child = log.child("api")
        child.warning("GET /enrollments -> 401")
        assert child.name == "tests.logger.parent.api"
        assert json.loads(stream.getvalue())["logger_name"] == "tests.logger.parent.api"

    def test_handlers_attached_once(self):
        first = StructuredLogger(name="tests.logger.once", stream=io.StringIO(), file_logging=False)
        StructuredLogger(name="tests.logger.once", file_logging=False)
        assert len(first.logger.handlers) == 1


class TestAuditTrail:
    def test_fields_travel_as_extra(self):
        from portal.utils.audit import log_audit_event

        stream = io.StringIO()
        log = StructuredLogger(name="tests.logger.audit", stream=stream, file_logging=False)
        event = log_audit_event(
            log, action="PSTO_REVIEW", entity_type="ProgramApplication",
            entity_id="a1", user_id="u-1", details={"decision": "returned"},
        )
        entry = json.loads(stream.getvalue())
        assert entry["extra"]["event"] == "AUDIT"
        assert entry["extra"]["entity_id"] == "a1"
        assert entry["extra"]["detail_decision"] == "returned"
        assert event.details == {"decision": "returned"}
