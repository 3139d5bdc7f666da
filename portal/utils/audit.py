"""
Review Audit Trail.

Every decision the client submits (PSTO review, TNA review, report
review, document review, meeting status change, account changes) is
logged as one ``AUDIT`` record whose fields travel in the log entry's
``extra`` block, so the trail can be filtered out of the log file.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from portal.logger import StructuredLogger

__all__ = ["AuditEvent", "log_audit_event"]

DetailValue = Union[str, int, float, bool, None]


class AuditEvent(BaseModel):
    """One audited decision."""

    model_config = ConfigDict(frozen=True)

    action: str
    entity_type: str
    entity_id: str
    user_id: str
    details: dict[str, DetailValue] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def log_fields(self) -> dict[str, DetailValue]:
        """Flat mapping for the logger's ``extra``; details are prefixed."""
        fields: dict[str, DetailValue] = {
            "event": "AUDIT",
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "occurred_at": self.occurred_at.isoformat(),
        }
        fields.update({f"detail_{key}": value for key, value in self.details.items()})
        return fields


def log_audit_event(
    logger: StructuredLogger,
    action: str,
    entity_type: str,
    entity_id: str,
    user_id: str,
    details: Optional[dict[str, DetailValue]] = None,
) -> AuditEvent:
    """Record *action* on ``entity_type``/``entity_id`` by *user_id* and return the event."""
    event = AuditEvent(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        details=details or {},
    )
    logger.info(
        "AUDIT %s %s %s by %s", action, entity_type, entity_id, user_id,
        extra=event.log_fields(),
    )
    return event
