"""Notification templates, claim-status triggers, and delivery preferences."""

from collections import defaultdict
from datetime import datetime
from typing import Any, Callable, Iterable, Optional

from collision_claims.models.claim import Claim, ClaimStatus
from collision_claims.models.messaging import (
    Notification,
    NotificationPreferences,
    NotificationTemplate,
    NotificationType,
)

TemplateBuilder = Callable[[dict[str, Any]], NotificationTemplate]

# Types that still go out during quiet hours.
QUIET_HOURS_ALLOWED = (NotificationType.CLAIM_APPROVED, NotificationType.MESSAGE_RECEIVED)

NOTIFICATION_ICONS = {
    NotificationType.CLAIM_SUBMITTED: "📤",
    NotificationType.CLAIM_APPROVED: "✅",
    NotificationType.CLAIM_REJECTED: "❌",
    NotificationType.MESSAGE_RECEIVED: "💬",
    NotificationType.ESTIMATE_READY: "📋",
    NotificationType.SUPPLEMENT_NEEDED: "📸",
    NotificationType.PAYMENT_DUE: "💳",
    NotificationType.PAYMENT_RECEIVED: "✅",
}


def _claim_submitted(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.CLAIM_SUBMITTED,
        title="Claim Submitted Successfully",
        body=(
            f"Your {data['vehicle_name']} claim has been submitted "
            "and is being analyzed by our AI."
        ),
        sound="default",
        vibrate=True,
    )


def _claim_approved(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.CLAIM_APPROVED,
        title="✅ Estimate Ready!",
        body=(
            f"Your {data['vehicle_name']} repair estimate is complete. "
            f"Total: {data['estimate_amount']}"
        ),
        priority="high",
        sound="success",
        vibrate=True,
        badge=1,
    )


def _claim_rejected(data: dict[str, Any]) -> NotificationTemplate:
    reason = data.get("reason") or ""
    return NotificationTemplate(
        type=NotificationType.CLAIM_REJECTED,
        title="Claim Update",
        body=(
            f"We're unable to provide an estimate for your {data['vehicle_name']} "
            f"at this time. {reason}"
        ).strip(),
        priority="high",
        sound="default",
        vibrate=True,
    )


def _message_received(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.MESSAGE_RECEIVED,
        title=f"New message from {data['sender_name']}",
        body=data["message_preview"],
        priority="high",
        sound="message",
        vibrate=True,
        badge=1,
    )


def _estimate_ready(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.ESTIMATE_READY,
        title="Your Estimate is Ready!",
        body=(
            f"{data['body_shop_name']} has completed your {data['vehicle_name']} estimate. "
            "Tap to view details."
        ),
        priority="high",
        sound="success",
        vibrate=True,
        badge=1,
    )


def _supplement_needed(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.SUPPLEMENT_NEEDED,
        title="Additional Information Needed",
        body=(
            f"{data['body_shop_name']} needs more information about your "
            f"{data['vehicle_name']}. {data['request_details']}"
        ),
        priority="high",
        sound="default",
        vibrate=True,
        badge=1,
    )


def _payment_due(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.PAYMENT_DUE,
        title="Payment Due",
        body=(
            f"Your payment of {data['amount']} for {data['vehicle_name']} "
            f"is due on {data['due_date']}."
        ),
        sound="default",
    )


def _payment_received(data: dict[str, Any]) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.PAYMENT_RECEIVED,
        title="Payment Received",
        body=f"Thank you! Your payment of {data['amount']} has been received.",
        sound="success",
    )


NOTIFICATION_TEMPLATES: dict[NotificationType, TemplateBuilder] = {
    NotificationType.CLAIM_SUBMITTED: _claim_submitted,
    NotificationType.CLAIM_APPROVED: _claim_approved,
    NotificationType.CLAIM_REJECTED: _claim_rejected,
    NotificationType.MESSAGE_RECEIVED: _message_received,
    NotificationType.ESTIMATE_READY: _estimate_ready,
    NotificationType.SUPPLEMENT_NEEDED: _supplement_needed,
    NotificationType.PAYMENT_DUE: _payment_due,
    NotificationType.PAYMENT_RECEIVED: _payment_received,
}


def render_template(notification_type: NotificationType, **data: Any) -> NotificationTemplate:
    return NOTIFICATION_TEMPLATES[NotificationType(notification_type)](data)


def vehicle_name(claim: Claim) -> str:
    v = claim.vehicle
    return f"{v.year} {v.make} {v.model}"


def _format_amount(total: float) -> str:
    text = f"{total:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"${text}"


def _ai_complete(claim: Claim) -> NotificationTemplate:
    return NotificationTemplate(
        type=NotificationType.ESTIMATE_READY,
        title="AI Analysis Complete",
        body=(
            f"Preliminary estimate ready for your {claim.vehicle.year} {claim.vehicle.make}. "
            "Body shop review in progress."
        ),
        sound="default",
        vibrate=True,
    )


STATUS_CHANGE_TRIGGERS: dict[ClaimStatus, Optional[tuple[str, Callable[[Claim], NotificationTemplate]]]] = {
    ClaimStatus.DRAFT: None,
    ClaimStatus.ANALYZING: (
        "claim:submitted",
        lambda claim: render_template(
            NotificationType.CLAIM_SUBMITTED, vehicle_name=vehicle_name(claim)
        ),
    ),
    ClaimStatus.PENDING_REVIEW: ("claim:ai_complete", _ai_complete),
    ClaimStatus.SUPPLEMENT_NEEDED: (
        "claim:supplement_requested",
        lambda claim: render_template(
            NotificationType.SUPPLEMENT_NEEDED,
            body_shop_name=claim.body_shop_name or "Your body shop",
            vehicle_name=vehicle_name(claim),
            request_details="Please provide additional photos.",
        ),
    ),
    ClaimStatus.APPROVED: (
        "claim:approved",
        lambda claim: render_template(
            NotificationType.CLAIM_APPROVED,
            vehicle_name=vehicle_name(claim),
            estimate_amount=(
                _format_amount(claim.estimate.total) if claim.estimate else "Ready to view"
            ),
        ),
    ),
    ClaimStatus.REJECTED: (
        "claim:rejected",
        lambda claim: render_template(
            NotificationType.CLAIM_REJECTED,
            vehicle_name=vehicle_name(claim),
            reason=claim.rejection_reason,
        ),
    ),
}


def get_status_change_notification(claim: Claim) -> Optional[tuple[str, NotificationTemplate]]:
    """(event name, template) for the claim's current status, or None for drafts."""
    trigger = STATUS_CHANGE_TRIGGERS.get(claim.status)
    if trigger is None:
        return None
    event, build = trigger
    return event, build(claim)


def should_send_notification(
    notification_type: NotificationType,
    preferences: NotificationPreferences,
    now: Optional[datetime] = None,
) -> bool:
    """Apply the global switch, per-type switches, and quiet hours.

    During quiet hours only approvals and new messages go through. A start
    hour after the end hour wraps past midnight.
    """
    notification_type = NotificationType(notification_type)
    if not preferences.enabled:
        return False
    if not preferences.types.get(notification_type, True):
        return False

    quiet = preferences.quiet_hours
    if quiet is not None and quiet.enabled:
        hour = (now or datetime.now()).hour
        if quiet.start > quiet.end:
            in_quiet = hour >= quiet.start or hour < quiet.end
        else:
            in_quiet = quiet.start <= hour < quiet.end
        if in_quiet:
            return notification_type in QUIET_HOURS_ALLOWED

    return True


def format_notification_text(notification: Notification) -> dict[str, str]:
    return {
        "title": notification.title,
        "body": notification.message,
        "icon": NOTIFICATION_ICONS.get(notification.type, "🔔"),
    }


def group_notifications(notifications: Iterable[Notification]) -> dict[str, list[Notification]]:
    groups: dict[str, list[Notification]] = defaultdict(list)
    for notification in notifications:
        groups[notification.type.value].append(notification)
    return dict(groups)


def get_unread_notification_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.is_read)


def get_claim_notifications(
    notifications: Iterable[Notification], claim_id: str
) -> list[Notification]:
    return [n for n in notifications if n.claim_id == claim_id]
