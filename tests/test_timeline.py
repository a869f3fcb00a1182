"""Tests for claim timeline progress, events, and status text."""

from datetime import datetime, timedelta, timezone

import pytest

from collision_claims.models.claim import ClaimStatus
from collision_claims.tools.timeline import (
    REJECTED_STEP,
    TIMELINE_STEPS,
    calculate_timeline_progress,
    format_timestamp,
    get_elapsed_time,
    get_status_message,
    get_step_for_status,
    get_step_index,
    get_timeline_events,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


class TestSteps:
    """Tests for step lookup."""

    def test_step_order(self):
        assert [s.id for s in TIMELINE_STEPS] == [
            "draft",
            "analyzing",
            "pending_review",
            "supplement_needed",
            "approved",
            "completed",
        ]

    def test_rejected_has_its_own_step(self):
        assert get_step_for_status(ClaimStatus.REJECTED) is REJECTED_STEP
        assert get_step_index("rejected") == -1

    def test_unknown_status(self):
        assert get_step_for_status("archived") is None
        assert get_step_index("archived") == -1


class TestCalculateTimelineProgress:
    """Tests for calculate_timeline_progress."""

    @pytest.mark.parametrize(
        "status,step,percent,milestone",
        [
            ("draft", 1, 0, "AI Analysis"),
            ("analyzing", 2, 20, "Body Shop Review"),
            ("pending_review", 3, 40, "Additional Info Needed"),
            ("supplement_needed", 4, 60, "Estimate Ready"),
            ("approved", 5, 80, "All Done!"),
            ("completed", 6, 100, None),
        ],
    )
    def test_progress_by_status(self, status, step, percent, milestone):
        progress = calculate_timeline_progress(status, now=NOW)
        assert progress.current_step == step
        assert progress.total_steps == 5
        assert progress.percent_complete == percent
        assert progress.next_milestone == milestone

    def test_rejected(self):
        progress = calculate_timeline_progress(ClaimStatus.REJECTED)
        assert progress.current_step == 0
        assert progress.percent_complete == 0
        assert progress.next_milestone is None
        assert progress.estimated_time_remaining is None

    def test_time_remaining_text(self):
        assert calculate_timeline_progress("draft").estimated_time_remaining == "5-10 minutes to complete"
        assert calculate_timeline_progress("analyzing").estimated_time_remaining == "1-2 minutes"
        assert (
            calculate_timeline_progress("supplement_needed").estimated_time_remaining
            == "Waiting for your response"
        )
        assert calculate_timeline_progress("approved").estimated_time_remaining is None

    @pytest.mark.parametrize(
        "hours_ago,expected",
        [(None, "4-24 hours"), (1, "3 hours"), (2.5, "2 hours"), (10, "Within 24 hours"), (30, "Soon")],
    )
    def test_pending_review_countdown(self, hours_ago, expected):
        submitted = None if hours_ago is None else NOW - timedelta(hours=hours_ago)
        progress = calculate_timeline_progress("pending_review", submitted_at=submitted, now=NOW)
        assert progress.estimated_time_remaining == expected


class TestTimelineEvents:
    """Tests for get_timeline_events."""

    def test_pending_review_events(self):
        created = NOW - timedelta(days=1)
        submitted = NOW - timedelta(hours=2)
        events = get_timeline_events("pending_review", created, submitted)
        assert [e.status for e in events] == [
            "completed",
            "completed",
            "current",
            "upcoming",
            "upcoming",
            "upcoming",
        ]
        assert events[0].timestamp == created
        assert events[1].timestamp == submitted
        assert events[2].timestamp == submitted
        assert events[3].timestamp is None

    def test_approved_current_step_uses_review_time(self):
        events = get_timeline_events("approved", NOW, NOW, reviewed_at=NOW + timedelta(hours=3))
        assert events[4].status == "current"
        assert events[4].timestamp == NOW + timedelta(hours=3)

    def test_rejected_events(self):
        reviewed = NOW + timedelta(hours=5)
        events = get_timeline_events("rejected", NOW, NOW, reviewed)
        assert [e.step.id for e in events] == ["draft", "analyzing", "pending_review", "rejected"]
        assert events[-1].status == "current"
        assert events[-1].timestamp == reviewed
        assert events[2].timestamp is None


class TestStatusText:
    """Tests for status messages and time formatting."""

    def test_pending_review_message_includes_estimate(self):
        progress = calculate_timeline_progress("pending_review")
        message = get_status_message("pending_review", progress)
        assert message.title == "Under Professional Review"
        assert message.message == (
            "A body shop technician is reviewing your claim. Estimated time: 4-24 hours"
        )
        assert message.action is None

    def test_approved_message(self):
        message = get_status_message(ClaimStatus.APPROVED, calculate_timeline_progress("approved"))
        assert message.title == "Estimate Ready!"
        assert message.action == "View Estimate"

    def test_unknown_status_message(self):
        message = get_status_message("archived", calculate_timeline_progress("archived"))
        assert message.title == "Processing"

    @pytest.mark.parametrize(
        "delta,expected",
        [
            (timedelta(seconds=30), "0 minutes ago"),
            (timedelta(minutes=1), "1 minute ago"),
            (timedelta(minutes=59), "59 minutes ago"),
            (timedelta(hours=1), "1 hour ago"),
            (timedelta(hours=23), "23 hours ago"),
            (timedelta(days=1), "1 day ago"),
            (timedelta(days=3, hours=2), "3 days ago"),
        ],
    )
    def test_elapsed_time(self, delta, expected):
        assert get_elapsed_time(NOW - delta, NOW) == expected

    def test_format_timestamp(self):
        assert format_timestamp(datetime(2026, 3, 7, 15, 5)) == "Mar 7, 3:05 PM"
        assert format_timestamp(datetime(2026, 3, 7, 0, 30)) == "Mar 7, 12:30 AM"
