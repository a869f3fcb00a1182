"""Claim progress timeline: ordered steps, progress, events, and status text."""

import math
from datetime import datetime, timezone
from typing import Optional

from collision_claims.models.claim import ClaimStatus
from collision_claims.models.timeline import (
    StatusMessage,
    TimelineEvent,
    TimelineProgress,
    TimelineStep,
)
from collision_claims.utils.numbers import round_int

TIMELINE_STEPS: list[TimelineStep] = [
    TimelineStep(
        id="draft",
        status="draft",
        title="Creating Claim",
        description="Enter vehicle information and upload photos",
        icon="📝",
        estimated_duration="5-10 min",
    ),
    TimelineStep(
        id="analyzing",
        status="analyzing",
        title="AI Analysis",
        description="Our AI is analyzing damage and generating preliminary estimate",
        icon="🤖",
        estimated_duration="1-2 min",
    ),
    TimelineStep(
        id="pending_review",
        status="pending_review",
        title="Body Shop Review",
        description="Professional technician reviewing your photos and AI analysis",
        icon="👨‍🔧",
        estimated_duration="4-24 hours",
    ),
    TimelineStep(
        id="supplement_needed",
        status="supplement_needed",
        title="Additional Info Needed",
        description="Body shop needs more photos or information",
        icon="📸",
        estimated_duration="Waiting on you",
    ),
    TimelineStep(
        id="approved",
        status="approved",
        title="Estimate Ready",
        description="Your repair estimate is complete and ready to view",
        icon="✅",
    ),
    TimelineStep(
        id="completed",
        status="completed",
        title="All Done!",
        description="Claim process complete",
        icon="🎉",
    ),
]

REJECTED_STEP = TimelineStep(
    id="rejected",
    status="rejected",
    title="Claim Declined",
    description="Unable to provide estimate at this time",
    icon="❌",
)

# The terminal "completed" step does not count toward progress.
TOTAL_STEPS = len(TIMELINE_STEPS) - 1
REVIEW_TARGET_HOURS = 4
REVIEW_WINDOW_HOURS = 24

_STATUS_MESSAGES = {
    ClaimStatus.DRAFT: StatusMessage(
        title="Complete Your Claim",
        message="Add photos and vehicle details to submit your claim",
        action="Continue Editing",
    ),
    ClaimStatus.ANALYZING: StatusMessage(
        title="Analyzing Damage",
        message="Our AI is processing your photos and generating a preliminary estimate",
    ),
    ClaimStatus.SUPPLEMENT_NEEDED: StatusMessage(
        title="More Information Needed",
        message="The body shop needs additional photos or details to complete your estimate",
        action="Provide Information",
    ),
    ClaimStatus.APPROVED: StatusMessage(
        title="Estimate Ready!",
        message="Your repair estimate is complete and ready to view",
        action="View Estimate",
    ),
    ClaimStatus.REJECTED: StatusMessage(
        title="Unable to Provide Estimate",
        message=(
            "We're unable to provide an estimate at this time. "
            "Please contact the body shop for more information."
        ),
        action="Contact Support",
    ),
}


def _status_value(status: ClaimStatus | str) -> str:
    return status.value if isinstance(status, ClaimStatus) else str(status)


def get_step_for_status(status: ClaimStatus | str) -> Optional[TimelineStep]:
    value = _status_value(status)
    if value == ClaimStatus.REJECTED.value:
        return REJECTED_STEP
    return next((s for s in TIMELINE_STEPS if s.status == value), None)


def get_step_index(status: ClaimStatus | str) -> int:
    """Position in TIMELINE_STEPS; -1 for rejected or unknown statuses."""
    value = _status_value(status)
    for index, step in enumerate(TIMELINE_STEPS):
        if step.status == value and value != ClaimStatus.REJECTED.value:
            return index
    return -1


def _estimated_time_remaining(
    status: str, submitted_at: Optional[datetime], now: datetime
) -> Optional[str]:
    if status == ClaimStatus.DRAFT.value:
        return "5-10 minutes to complete"
    if status == ClaimStatus.ANALYZING.value:
        return "1-2 minutes"
    if status == ClaimStatus.PENDING_REVIEW.value:
        if submitted_at is None:
            return "4-24 hours"
        hours_since = (now - submitted_at).total_seconds() / 3600
        if hours_since < REVIEW_TARGET_HOURS:
            return f"{round_int(REVIEW_TARGET_HOURS - hours_since)} hours"
        if hours_since < REVIEW_WINDOW_HOURS:
            return "Within 24 hours"
        return "Soon"
    if status == ClaimStatus.SUPPLEMENT_NEEDED.value:
        return "Waiting for your response"
    return None


def calculate_timeline_progress(
    status: ClaimStatus | str,
    submitted_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> TimelineProgress:
    """Progress through the claim steps.

    Rejected claims report step 0 at 0% with no milestone. Otherwise the
    percentage is the step index over the five countable steps, and pending
    review claims estimate the remaining time from when they were submitted.
    """
    value = _status_value(status)
    if value == ClaimStatus.REJECTED.value:
        return TimelineProgress(current_step=0, total_steps=TOTAL_STEPS, percent_complete=0)

    index = get_step_index(value)
    percent = round_int(index / TOTAL_STEPS * 100) if index >= 0 else 0
    next_index = index + 1
    next_milestone = TIMELINE_STEPS[next_index].title if next_index < len(TIMELINE_STEPS) else None

    now = now or datetime.now(timezone.utc)
    return TimelineProgress(
        current_step=index + 1,
        total_steps=TOTAL_STEPS,
        percent_complete=percent,
        estimated_time_remaining=_estimated_time_remaining(value, submitted_at, now),
        next_milestone=next_milestone,
    )


def _step_timestamp(
    step: TimelineStep,
    is_current: bool,
    created_at: datetime,
    submitted_at: Optional[datetime],
    reviewed_at: Optional[datetime],
) -> Optional[datetime]:
    if step.status == ClaimStatus.DRAFT.value:
        return created_at
    if step.status in (ClaimStatus.ANALYZING.value, ClaimStatus.PENDING_REVIEW.value):
        return submitted_at
    if step.status == ClaimStatus.APPROVED.value and is_current:
        return reviewed_at
    return None


def get_timeline_events(
    status: ClaimStatus | str,
    created_at: datetime,
    submitted_at: Optional[datetime] = None,
    reviewed_at: Optional[datetime] = None,
) -> list[TimelineEvent]:
    value = _status_value(status)
    if value == ClaimStatus.REJECTED.value:
        events = [
            TimelineEvent(
                step=step,
                status="completed",
                timestamp=(created_at, submitted_at, None)[index],
            )
            for index, step in enumerate(TIMELINE_STEPS[:3])
        ]
        events.append(TimelineEvent(step=REJECTED_STEP, status="current", timestamp=reviewed_at))
        return events

    current = get_step_index(value)
    events = []
    for index, step in enumerate(TIMELINE_STEPS):
        if index < current:
            events.append(
                TimelineEvent(
                    step=step,
                    status="completed",
                    timestamp=_step_timestamp(step, False, created_at, submitted_at, reviewed_at),
                )
            )
        elif index == current:
            events.append(
                TimelineEvent(
                    step=step,
                    status="current",
                    timestamp=_step_timestamp(step, True, created_at, submitted_at, reviewed_at),
                )
            )
        else:
            events.append(TimelineEvent(step=step, status="upcoming"))
    return events


def get_status_message(status: ClaimStatus | str, progress: TimelineProgress) -> StatusMessage:
    value = _status_value(status)
    if value == ClaimStatus.PENDING_REVIEW.value:
        message = "A body shop technician is reviewing your claim."
        if progress.estimated_time_remaining:
            message += f" Estimated time: {progress.estimated_time_remaining}"
        return StatusMessage(title="Under Professional Review", message=message)
    try:
        return _STATUS_MESSAGES[ClaimStatus(value)].model_copy()
    except (ValueError, KeyError):
        return StatusMessage(title="Processing", message="Your claim is being processed")


def get_elapsed_time(created_at: datetime, now: Optional[datetime] = None) -> str:
    """e.g. "5 minutes ago", "1 hour ago", "3 days ago"."""
    now = now or datetime.now(timezone.utc)
    seconds = (now - created_at).total_seconds()
    minutes = math.floor(seconds / 60)
    hours = math.floor(seconds / 3600)
    days = math.floor(seconds / 86400)
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    return f"{days} day{'s' if days != 1 else ''} ago"


def format_timestamp(value: datetime) -> str:
    """e.g. "Mar 7, 3:05 PM"."""
    hour = value.hour % 12 or 12
    suffix = "PM" if value.hour >= 12 else "AM"
    return f"{value.strftime('%b')} {value.day}, {hour}:{value.minute:02d} {suffix}"
