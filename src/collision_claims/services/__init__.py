"""Stateful services: authentication, claims, messaging, and notifications."""

from collision_claims.services.auth import AuthService
from collision_claims.services.claims import ClaimService, get_claim_analytics, is_auto_approval_eligible
from collision_claims.services.messaging import MessagingService
from collision_claims.services.notifications import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    NotificationService,
    RecordingNotificationDispatcher,
)

__all__ = [
    "AuthService",
    "ClaimService",
    "LoggingNotificationDispatcher",
    "MessagingService",
    "NotificationDispatcher",
    "NotificationService",
    "RecordingNotificationDispatcher",
    "get_claim_analytics",
    "is_auto_approval_eligible",
]
