"""Notification delivery: pluggable dispatchers plus an in-app notification inbox."""

import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol

from collision_claims.config.settings import NOTIFICATION_INBOX_LIMIT
from collision_claims.models.claim import Claim
from collision_claims.models.messaging import (
    Notification,
    NotificationPreferences,
    NotificationType,
)
from collision_claims.observability import get_logger, log_claim_event
from collision_claims.tools.notifications import (
    get_status_change_notification,
    should_send_notification,
)
from collision_claims.utils.random_source import short_id

logger = get_logger(__name__)

CLAIM_STATUS_MESSAGES = {
    "submitted": ("Claim Submitted", "Your claim has been submitted for review."),
    "approved": (
        "Claim Approved!",
        "Your claim has been approved and is ready for processing.",
    ),
    "rejected": (
        "Claim Requires Review",
        "Your claim requires additional review. Please check the details.",
    ),
}


class NotificationDispatcher(Protocol):
    """Delivery backend (push service, device notifications, ...)."""

    def send(self, title: str, body: str, data: dict[str, Any], channel: str) -> str:
        """Deliver one notification and return its delivery ID."""
        ...


class LoggingNotificationDispatcher:
    """Dispatcher that only logs. Default when no push backend is configured."""

    def send(self, title: str, body: str, data: dict[str, Any], channel: str) -> str:
        notification_id = f"notif-{short_id()}"
        log_claim_event(
            logger,
            "notification_sent",
            claim_id=data.get("claim_id"),
            notification_id=notification_id,
            channel=channel,
            title=title,
            type=data.get("type"),
        )
        return notification_id


class RecordingNotificationDispatcher:
    """Keeps every sent notification in memory; used by tests and dry runs."""

    def __init__(self):
        self.sent: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def send(self, title: str, body: str, data: dict[str, Any], channel: str) -> str:
        notification_id = f"notif-{short_id()}"
        with self._lock:
            self.sent.append(
                {
                    "id": notification_id,
                    "title": title,
                    "body": body,
                    "data": dict(data),
                    "channel": channel,
                }
            )
        return notification_id


class NotificationService:
    """Sends notifications through a dispatcher and keeps an in-app inbox.

    Preferences gate delivery (global switch, per-type switches, quiet hours).
    Suppressed notifications are neither dispatched nor added to the inbox.
    The inbox keeps the newest inbox_limit notifications.
    """

    def __init__(
        self,
        dispatcher: Optional[NotificationDispatcher] = None,
        preferences: Optional[NotificationPreferences] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        inbox_limit: int = NOTIFICATION_INBOX_LIMIT,
    ):
        self._dispatcher = dispatcher or LoggingNotificationDispatcher()
        self.preferences = preferences or NotificationPreferences()
        self._clock = clock
        self._lock = threading.RLock()
        self._inbox: list[Notification] = []
        self._inbox_limit = max(1, inbox_limit)

    def send(
        self,
        notification_type: NotificationType,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
        channel: str = "default",
        user_id: str = "",
    ) -> Optional[str]:
        """Dispatch one notification. Returns its ID, or None when preferences suppress it."""
        notification_type = NotificationType(notification_type)
        now = self._clock()
        if not should_send_notification(notification_type, self.preferences, now.astimezone()):
            logger.debug("Notification %s suppressed by preferences", notification_type.value)
            return None

        payload = {"type": notification_type.value, **(data or {})}
        notification_id = self._dispatcher.send(title, body, payload, channel)
        with self._lock:
            self._inbox.insert(
                0,
                Notification(
                    id=notification_id,
                    user_id=user_id,
                    type=notification_type,
                    title=title,
                    message=body,
                    claim_id=payload.get("claim_id"),
                    conversation_id=payload.get("conversation_id"),
                    created_at=now,
                ),
            )
            del self._inbox[self._inbox_limit :]
        return notification_id

    def notify_new_message(
        self,
        sender_name: str,
        message_preview: str,
        conversation_id: str,
        user_id: str = "",
    ) -> Optional[str]:
        return self.send(
            NotificationType.MESSAGE_RECEIVED,
            f"New message from {sender_name}",
            message_preview,
            {"conversation_id": conversation_id},
            channel="messages",
            user_id=user_id,
        )

    def notify_claim_status(self, status: str, claim_id: str, user_id: str = "") -> Optional[str]:
        """status is one of submitted, approved, rejected."""
        if status not in CLAIM_STATUS_MESSAGES:
            raise ValueError(f"Unknown claim notification status: {status}")
        title, body = CLAIM_STATUS_MESSAGES[status]
        return self.send(
            NotificationType(f"claim_{status}"),
            title,
            body,
            {"claim_id": claim_id},
            channel="claims",
            user_id=user_id,
        )

    def notify_estimate_ready(self, claim_id: str, total: float, user_id: str = "") -> Optional[str]:
        return self.send(
            NotificationType.ESTIMATE_READY,
            "Estimate Ready",
            f"Your repair estimate is ready: ${total:.2f}",
            {"claim_id": claim_id},
            channel="claims",
            user_id=user_id,
        )

    def notify_status_change(self, claim: Claim) -> Optional[str]:
        """Send the templated notification for the claim's new status, if it has one."""
        triggered = get_status_change_notification(claim)
        if triggered is None:
            return None
        event, template = triggered
        return self.send(
            template.type,
            template.title,
            template.body,
            {"claim_id": claim.id, "event": event},
            channel="claims",
            user_id=claim.user_id,
        )

    # ------------------------------------------------------------------
    # Inbox
    # ------------------------------------------------------------------

    @property
    def notifications(self) -> list[Notification]:
        """Newest first."""
        with self._lock:
            return list(self._inbox)

    @property
    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._inbox if not n.is_read)

    def mark_as_read(self, notification_id: str) -> None:
        now = self._clock()
        with self._lock:
            self._inbox = [
                n.model_copy(update={"is_read": True, "read_at": now}) if n.id == notification_id else n
                for n in self._inbox
            ]

    def mark_all_as_read(self) -> None:
        now = self._clock()
        with self._lock:
            self._inbox = [n.model_copy(update={"is_read": True, "read_at": now}) for n in self._inbox]

    def clear_notification(self, notification_id: str) -> None:
        with self._lock:
            self._inbox = [n for n in self._inbox if n.id != notification_id]

    def clear_all_notifications(self) -> None:
        with self._lock:
            self._inbox = []
