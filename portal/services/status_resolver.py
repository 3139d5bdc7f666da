"""
Status Resolver.

Pure mapping from an enrollment/application status record to what the
views render: a semantic badge variant, a human-readable label, per-stage
display states, and the TNA gate that decides which stages may be opened.

Every status view in the client goes through this module; nothing else
compares status strings for display purposes.

The functions accept either a pydantic model (``Enrollment``,
``ProgramApplication``) or a plain mapping straight from the API, with
camelCase or snake_case keys.  They perform no I/O and hold no state.

Branch order is significant: compound checks such as
``submitted + under_review`` are tested before the plain fallbacks, and
the first match wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Optional, Union

from pydantic import BaseModel

from portal.models.enrollment import ServiceStage, StageRecord
from portal.models.enums import (
    BadgeColor,
    BadgeVariant,
    EnrollmentStatus,
    ReviewStatus,
    StageId,
    StageState,
)
from portal.models.status_models import StageView, StatusBadge, StatusView

__all__ = [
    "DEFAULT_STAGES",
    "StatusRecord",
    "build_status_view",
    "can_access_stage",
    "find_stage_conflicts",
    "get_review_status_color",
    "get_stage_color",
    "get_stage_status",
    "get_status_badge_variant",
    "get_status_text",
    "resolve_status_badge",
]

StatusRecord = Union[BaseModel, Mapping[str, object]]
StageRef = Union[ServiceStage, StageRecord, Mapping[str, object], str]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_STAGES: tuple[tuple[str, str], ...] = (
    (StageId.TNA, "Technology Needs Assessment (TNA)"),
    (StageId.RTEC, "Review and Technical Evaluation Committee"),
    (StageId.FUNDING, "Funding"),
    (StageId.TRAINING, "Technology Training"),
    (StageId.CONSULTANCY, "Productivity Consultancy"),
    (StageId.LIQUIDATION, "Liquidation"),
)

STAGE_COLOR_COMPLETED: str = "#22c55e"
STAGE_COLOR_CURRENT: str = "#3b82f6"
STAGE_COLOR_PENDING: str = "#d1d5db"

_STAGE_COLORS: dict[str, str] = {
    StageState.COMPLETED: STAGE_COLOR_COMPLETED,
    StageState.CURRENT: STAGE_COLOR_CURRENT,
    StageState.PENDING: STAGE_COLOR_PENDING,
}

_STATUS_BADGES: dict[str, StatusBadge] = {
    # Application workflow
    "pending": StatusBadge(color=BadgeColor.YELLOW, text="Pending"),
    "under_review": StatusBadge(color=BadgeColor.BLUE, text="Under Review"),
    "psto_approved": StatusBadge(color=BadgeColor.GREEN, text="PSTO Approved"),
    "psto_rejected": StatusBadge(color=BadgeColor.RED, text="PSTO Rejected"),
    "tna_scheduled": StatusBadge(color=BadgeColor.BLUE, text="TNA Scheduled"),
    "tna_conducted": StatusBadge(color=BadgeColor.GREEN, text="TNA Conducted"),
    "tna_report_submitted": StatusBadge(color=BadgeColor.BLUE, text="TNA Report Submitted"),
    "dost_mimaropa_approved": StatusBadge(color=BadgeColor.GREEN, text="DOST MIMAROPA Approved"),
    "dost_mimaropa_rejected": StatusBadge(color=BadgeColor.RED, text="DOST MIMAROPA Rejected"),
    "returned": StatusBadge(color=BadgeColor.ORANGE, text="Returned"),
    "rejected": StatusBadge(color=BadgeColor.RED, text="Rejected"),
    "approved": StatusBadge(color=BadgeColor.GREEN, text="Approved"),
    # TNA lifecycle
    "scheduled": StatusBadge(color=BadgeColor.BLUE, text="Scheduled"),
    "in_progress": StatusBadge(color=BadgeColor.PURPLE, text="In Progress"),
    "completed": StatusBadge(color=BadgeColor.GREEN, text="Completed"),
    "report_uploaded": StatusBadge(color=BadgeColor.BLUE, text="Report Uploaded"),
    "submitted_to_dost": StatusBadge(color=BadgeColor.BLUE, text="Submitted to DOST"),
    "cancelled": StatusBadge(color=BadgeColor.RED, text="Cancelled"),
    # Accounts
    "active": StatusBadge(color=BadgeColor.GREEN, text="Active"),
    "inactive": StatusBadge(color=BadgeColor.GRAY, text="Inactive"),
    # Projects
    "draft": StatusBadge(color=BadgeColor.GRAY, text="Draft"),
    "published": StatusBadge(color=BadgeColor.GREEN, text="Published"),
    "archived": StatusBadge(color=BadgeColor.GRAY, text="Archived"),
}

_REVIEW_COLORS: dict[str, BadgeColor] = {
    ReviewStatus.APPROVED: BadgeColor.GREEN,
    ReviewStatus.REJECTED: BadgeColor.RED,
    ReviewStatus.RETURNED: BadgeColor.YELLOW,
    ReviewStatus.PENDING: BadgeColor.BLUE,
}


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def _field(record: StatusRecord, *names: str) -> object:
    """Read the first present attribute/key among *names*; ``None`` if absent."""
    if isinstance(record, Mapping):
        for name in names:
            if name in record:
                return record[name]
        return None
    for name in names:
        value = getattr(record, name, None)
        if value is not None:
            return value
    return None


def _status(record: StatusRecord) -> Optional[str]:
    value = _field(record, "status")
    return None if value is None else str(value)


def _tna_status(record: StatusRecord) -> Optional[str]:
    value = _field(record, "tna_status", "tnaStatus")
    return None if value is None else str(value)


def _stage_id(stage: StageRef) -> str:
    if isinstance(stage, str):
        return stage
    if isinstance(stage, StageRecord):
        return stage.stage_id
    value = _field(stage, "id", "stage_id", "stageId")
    return "" if value is None else str(value)


def _stage_records(record: StatusRecord) -> list[StatusRecord]:
    value = _field(record, "stage_data", "stageData")
    if not value:
        return []
    return list(value)  # type: ignore[call-overload]


def _record_stage_id(entry: StatusRecord) -> str:
    value = _field(entry, "stage_id", "stageId")
    return "" if value is None else str(value)


def _truthy(entry: StatusRecord, *names: str) -> bool:
    return bool(_field(entry, *names))


# ---------------------------------------------------------------------------
# Badge / label
# ---------------------------------------------------------------------------


def get_status_badge_variant(status: Optional[str], tna_status: Optional[str]) -> BadgeVariant:
    """Map ``(status, tnaStatus)`` to a badge variant.

    Unknown combinations fall through to ``secondary``.
    """
    if status == EnrollmentStatus.DRAFT:
        return BadgeVariant.SECONDARY
    if status == EnrollmentStatus.SUBMITTED and tna_status == ReviewStatus.UNDER_REVIEW:
        return BadgeVariant.WARNING
    if status == EnrollmentStatus.APPROVED and tna_status == ReviewStatus.APPROVED:
        return BadgeVariant.SUCCESS
    if status == EnrollmentStatus.REJECTED and tna_status == ReviewStatus.REJECTED:
        return BadgeVariant.DANGER
    if status == EnrollmentStatus.IN_PROGRESS:
        return BadgeVariant.INFO
    if status == EnrollmentStatus.COMPLETED:
        return BadgeVariant.SUCCESS
    return BadgeVariant.SECONDARY


def get_status_text(record: StatusRecord) -> str:
    """Human-readable label for a status record.

    Falls back to the raw ``status`` string (empty string when absent).
    """
    status = _status(record)
    tna_status = _tna_status(record)

    if status == EnrollmentStatus.DRAFT:
        return "Draft"
    if status == EnrollmentStatus.SUBMITTED and tna_status == ReviewStatus.UNDER_REVIEW:
        return "Under Review"
    if status == EnrollmentStatus.APPROVED and tna_status == ReviewStatus.APPROVED:
        return "TNA Approved"
    if status == EnrollmentStatus.REJECTED and tna_status == ReviewStatus.REJECTED:
        return "TNA Rejected"
    if status == EnrollmentStatus.IN_PROGRESS:
        return "In Progress"
    if status == EnrollmentStatus.COMPLETED:
        return "Completed"
    return status or ""


def resolve_status_badge(status: Optional[str]) -> StatusBadge:
    """Look up the shared badge for a single status tag.

    Covers application, TNA, account and project statuses; anything
    else renders gray with the raw tag as text.
    """
    if status is None:
        return StatusBadge(color=BadgeColor.GRAY, text="")
    badge = _STATUS_BADGES.get(str(status))
    if badge is not None:
        return badge
    return StatusBadge(color=BadgeColor.GRAY, text=str(status))


def get_review_status_color(status: Optional[str]) -> BadgeColor:
    """Colour for an application ``status`` or ``pstoStatus`` review tag."""
    if status is None:
        return BadgeColor.GRAY
    return _REVIEW_COLORS.get(str(status), BadgeColor.GRAY)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def get_stage_status(stage: StageRef, record: StatusRecord) -> StageState:
    """Display state of *stage* according to the record's ``stageData``.

    ``completed`` wins over ``inProgress``; a stage without a matching
    entry is ``pending``.
    """
    stage_id = _stage_id(stage)
    entry = next(
        (e for e in _stage_records(record) if _record_stage_id(e) == stage_id),
        None,
    )
    if entry is None:
        return StageState.PENDING
    if _truthy(entry, "completed"):
        return StageState.COMPLETED
    if _truthy(entry, "in_progress", "inProgress"):
        return StageState.CURRENT
    return StageState.PENDING


def get_stage_color(state: Optional[str]) -> str:
    """Hex colour for a stage state; unknown states render as pending."""
    if state is None:
        return STAGE_COLOR_PENDING
    return _STAGE_COLORS.get(str(state), STAGE_COLOR_PENDING)


def can_access_stage(record: StatusRecord, stage_id: str) -> bool:
    """TNA is always open; every later stage requires an approved TNA."""
    if stage_id == StageId.TNA:
        return True
    return _tna_status(record) == ReviewStatus.APPROVED


def find_stage_conflicts(record: StatusRecord) -> list[str]:
    """Stage ids flagged in progress when more than one is.

    The backend does not enforce a single current stage.  This only
    reports the condition; callers decide whether to log it.
    """
    current = [
        _record_stage_id(e)
        for e in _stage_records(record)
        if _truthy(e, "in_progress", "inProgress") and not _truthy(e, "completed")
    ]
    return current if len(current) > 1 else []


def _stage_list(record: StatusRecord) -> list[tuple[str, str]]:
    stages = _field(record, "stages")
    if stages:
        result: list[tuple[str, str]] = []
        for stage in stages:  # type: ignore[union-attr]
            stage_id = _stage_id(stage)
            name = _field(stage, "name")
            result.append((stage_id, str(name) if name else stage_id))
        return result
    return [(str(stage_id), name) for stage_id, name in DEFAULT_STAGES]


def build_status_view(record: StatusRecord) -> StatusView:
    """Bundle badge, label, stage states and conflicts for one record."""
    stages = []
    for stage_id, name in _stage_list(record):
        state = get_stage_status(stage_id, record)
        stages.append(
            StageView(
                stage_id=stage_id,
                name=name,
                state=state,
                color=get_stage_color(state),
                accessible=can_access_stage(record, stage_id),
            )
        )
    return StatusView(
        variant=get_status_badge_variant(_status(record), _tna_status(record)),
        label=get_status_text(record),
        stages=tuple(stages),
        conflicts=tuple(find_stage_conflicts(record)),
    )
