"""Tests for status badge, label and stage-state derivation."""

import pytest

from portal.models.enrollment import Enrollment
from portal.models.enums import BadgeColor, BadgeVariant, StageState
from portal.services.status_resolver import (
    STAGE_COLOR_COMPLETED,
    STAGE_COLOR_CURRENT,
    STAGE_COLOR_PENDING,
    build_status_view,
    can_access_stage,
    find_stage_conflicts,
    get_review_status_color,
    get_stage_color,
    get_stage_status,
    get_status_badge_variant,
    get_status_text,
    resolve_status_badge,
)


class TestBadgeVariant:
    """(status, tnaStatus) -> variant."""

    @pytest.mark.parametrize(
        "status, tna_status, expected",
        [
            ("draft", None, BadgeVariant.SECONDARY),
            ("draft", "approved", BadgeVariant.SECONDARY),
            ("submitted", "under_review", BadgeVariant.WARNING),
            ("approved", "approved", BadgeVariant.SUCCESS),
            ("rejected", "rejected", BadgeVariant.DANGER),
            ("in_progress", "approved", BadgeVariant.INFO),
            ("completed", None, BadgeVariant.SUCCESS),
        ],
    )
    def test_known_combinations(self, status, tna_status, expected):
        assert get_status_badge_variant(status, tna_status) == expected

    def test_unmatched_combinations_fall_back(self):
        assert get_status_badge_variant("submitted", "pending") == BadgeVariant.SECONDARY
        assert get_status_badge_variant("approved", "pending") == BadgeVariant.SECONDARY
        assert get_status_badge_variant(None, None) == BadgeVariant.SECONDARY


class TestStatusText:
    def test_compound_labels(self):
        assert get_status_text({"status": "submitted", "tnaStatus": "under_review"}) == "Under Review"
        assert get_status_text({"status": "approved", "tnaStatus": "approved"}) == "TNA Approved"
        assert get_status_text({"status": "rejected", "tna_status": "rejected"}) == "TNA Rejected"

    def test_raw_status_fallback(self):
        assert get_status_text({"status": "cancelled"}) == "cancelled"
        assert get_status_text({}) == ""

    def test_accepts_models(self):
        enrollment = Enrollment(status="in_progress", tna_status="approved")
        assert get_status_text(enrollment) == "In Progress"


class TestSharedBadges:
    def test_lookup(self):
        badge = resolve_status_badge("psto_approved")
        assert badge.color == BadgeColor.GREEN
        assert badge.text == "PSTO Approved"

    def test_unknown_is_gray_raw_text(self):
        badge = resolve_status_badge("on_hold")
        assert badge.color == BadgeColor.GRAY
        assert badge.text == "on_hold"

    def test_review_colors(self):
        assert get_review_status_color("returned") == BadgeColor.YELLOW
        assert get_review_status_color("pending") == BadgeColor.BLUE
        assert get_review_status_color(None) == BadgeColor.GRAY
        assert get_review_status_color("whatever") == BadgeColor.GRAY


class TestStages:
    """Stage state and TNA gating."""

    RECORD = {
        "status": "in_progress",
        "tnaStatus": "approved",
        "stageData": [
            {"stageId": "tna", "completed": True, "inProgress": True},
            {"stageId": "rtec", "inProgress": True},
            {"stageId": "funding"},
        ],
    }

    def test_completed_wins_over_in_progress(self):
        assert get_stage_status("tna", self.RECORD) == StageState.COMPLETED

    def test_in_progress_is_current(self):
        assert get_stage_status("rtec", self.RECORD) == StageState.CURRENT

    def test_missing_or_idle_is_pending(self):
        assert get_stage_status("funding", self.RECORD) == StageState.PENDING
        assert get_stage_status("training", self.RECORD) == StageState.PENDING
        assert get_stage_status({"id": "rtec"}, {}) == StageState.PENDING

    def test_stage_colors(self):
        assert get_stage_color(StageState.COMPLETED) == STAGE_COLOR_COMPLETED
        assert get_stage_color("current") == STAGE_COLOR_CURRENT
        assert get_stage_color("bogus") == STAGE_COLOR_PENDING
        assert get_stage_color(None) == STAGE_COLOR_PENDING

    @pytest.mark.parametrize("tna_status", [None, "pending", "under_review", "rejected"])
    def test_only_tna_open_before_approval(self, tna_status):
        record = {"tnaStatus": tna_status}
        assert can_access_stage(record, "tna")
        assert not can_access_stage(record, "rtec")
        assert not can_access_stage(record, "liquidation")

    def test_all_open_after_approval(self):
        assert can_access_stage({"tnaStatus": "approved"}, "funding")

    def test_conflicts_reported(self):
        record = {
            "stageData": [
                {"stageId": "rtec", "inProgress": True},
                {"stageId": "funding", "inProgress": True},
            ]
        }
        assert find_stage_conflicts(record) == ["rtec", "funding"]
        assert find_stage_conflicts(self.RECORD) == []


class TestStatusView:
    def test_default_stage_list(self):
        view = build_status_view({"status": "submitted", "tnaStatus": "under_review"})
        assert [s.stage_id for s in view.stages] == [
            "tna", "rtec", "funding", "training", "consultancy", "liquidation",
        ]
        assert view.variant == BadgeVariant.WARNING
        assert view.label == "Under Review"
        assert [s.accessible for s in view.stages] == [True] + [False] * 5

    def test_enrollment_stages_take_precedence(self):
        enrollment = Enrollment.model_validate(
            {
                "status": "approved",
                "tna_status": "approved",
                "stages": [{"id": "tna", "name": "TNA"}, {"id": "training", "name": "Training"}],
                "stage_data": [{"stage_id": "training", "in_progress": True}],
            }
        )
        view = build_status_view(enrollment)
        assert [(s.stage_id, s.name) for s in view.stages] == [("tna", "TNA"), ("training", "Training")]
        assert view.stages[1].state == StageState.CURRENT
        assert view.stages[1].color == STAGE_COLOR_CURRENT
        assert all(s.accessible for s in view.stages)

    def test_pure(self):
        record = dict(TestStages.RECORD)
        assert build_status_view(record) == build_status_view(record)
