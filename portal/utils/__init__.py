"""Helpers shared by repositories and services: key casing, request
bodies, multipart parts, display formatting and the audit trail."""

from portal.utils.audit import AuditEvent, log_audit_event
from portal.utils.general import convert_to_json_safe, file_part, format_date, safe_filename
from portal.utils.string_helpers import (
    denormalize_keys,
    normalize_keys,
    to_camel_case,
    to_snake_case,
)

__all__ = [
    "AuditEvent",
    "convert_to_json_safe",
    "denormalize_keys",
    "file_part",
    "format_date",
    "log_audit_event",
    "normalize_keys",
    "safe_filename",
    "to_camel_case",
    "to_snake_case",
]
