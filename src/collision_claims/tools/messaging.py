"""Message and conversation helpers: grouping, previews, validation, and sorting."""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from pydantic import BaseModel

from collision_claims.models.claim import UserRole
from collision_claims.models.messaging import (
    AttachmentType,
    Conversation,
    ConversationParticipant,
    Message,
    MessageStatus,
)
from collision_claims.utils.sanitization import MAX_MESSAGE_TEXT

GROUP_WINDOW = timedelta(minutes=5)
PREVIEW_LENGTH = 50
MAX_ATTACHMENT_SIZE = 10 * 1024 * 1024
ALLOWED_ATTACHMENT_TYPES = ("image/jpeg", "image/png", "image/heic", "application/pdf")

ATTACHMENT_PREVIEWS = {
    AttachmentType.IMAGE: "📷 Photo",
    AttachmentType.DOCUMENT: "📄 Document",
    AttachmentType.PDF: "📋 PDF",
}

ROLE_BADGE_COLORS = {
    UserRole.BODY_SHOP: "#007AFF",
    UserRole.INSURANCE_ADJUSTER: "#FF9500",
    UserRole.CUSTOMER: "#34C759",
}

ROLE_DISPLAY_NAMES = {
    UserRole.BODY_SHOP: "Body Shop",
    UserRole.INSURANCE_ADJUSTER: "Adjuster",
    UserRole.CUSTOMER: "Customer",
}

QUICK_REPLIES: dict[UserRole, list[str]] = {
    UserRole.CUSTOMER: [
        "Thanks for the update!",
        "When will it be ready?",
        "Can I see more photos?",
        "What are my options?",
        "I have a question",
    ],
    UserRole.BODY_SHOP: [
        "I'll need more photos",
        "Estimate is ready to view",
        "Parts have arrived",
        "Vehicle is ready for pickup",
        "Let me check on that",
    ],
    UserRole.INSURANCE_ADJUSTER: [
        "Approved for repair",
        "Need additional documentation",
        "Processing your claim",
        "Please provide more details",
        "Claim has been reviewed",
    ],
}


class MessageGroup(BaseModel):
    sender_id: str
    sender_name: str
    sender_role: UserRole
    messages: list[Message]
    timestamp: datetime


def group_messages_by_sender(messages: Iterable[Message]) -> list[MessageGroup]:
    """Consecutive messages from one sender, split when the gap reaches 5 minutes."""
    groups: list[MessageGroup] = []
    current: Optional[MessageGroup] = None
    for message in messages:
        if (
            current is not None
            and current.sender_id == message.sender_id
            and message.created_at - current.timestamp < GROUP_WINDOW
        ):
            current.messages.append(message)
            current.timestamp = message.created_at
            continue
        current = MessageGroup(
            sender_id=message.sender_id,
            sender_name=message.sender_name,
            sender_role=message.sender_role,
            messages=[message],
            timestamp=message.created_at,
        )
        groups.append(current)
    return groups


def _clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'PM' if value.hour >= 12 else 'AM'}"


def format_message_time(value: datetime, now: Optional[datetime] = None) -> str:
    """ "2:30 PM" today, "Yesterday 2:30 PM", "Tue 2:30 PM" this week, else "Mar 7, 2:30 PM"."""
    now = now or datetime.now(value.tzinfo)
    days_ago = (now.date() - value.date()).days
    if days_ago == 0:
        return _clock(value)
    if days_ago == 1:
        return f"Yesterday {_clock(value)}"
    if days_ago <= 7:
        return f"{value.strftime('%a')} {_clock(value)}"
    return f"{value.strftime('%b')} {value.day}, {_clock(value)}"


def format_conversation_time(value: datetime, now: Optional[datetime] = None) -> str:
    """Compact age for conversation lists: Just now, 5m, 3h, 2d, or "Mar 7"."""
    now = now or datetime.now(value.tzinfo or timezone.utc)
    seconds = (now - value).total_seconds()
    minutes = math.floor(seconds / 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m"
    hours = math.floor(seconds / 3600)
    if hours < 24:
        return f"{hours}h"
    days = math.floor(seconds / 86400)
    if days < 7:
        return f"{days}d"
    return f"{value.strftime('%b')} {value.day}"


def get_message_preview(message: Message) -> str:
    if message.attachments:
        return ATTACHMENT_PREVIEWS.get(message.attachments[0].type, "📎 Attachment")
    if len(message.text) > PREVIEW_LENGTH:
        return message.text[:PREVIEW_LENGTH] + "..."
    return message.text


def get_unread_count_for_user(conversation: Conversation, user_id: str) -> int:
    return conversation.unread_count.get(user_id, 0)


def get_other_participants(
    conversation: Conversation, current_user_id: str
) -> list[ConversationParticipant]:
    return [p for p in conversation.participants if p.user_id != current_user_id]


def format_participant_names(participants: list[ConversationParticipant]) -> str:
    if not participants:
        return "Unknown"
    if len(participants) == 1:
        return participants[0].user_name
    if len(participants) == 2:
        return f"{participants[0].user_name}, {participants[1].user_name}"
    return f"{participants[0].user_name} +{len(participants) - 1}"


def get_role_badge_color(role: UserRole | str) -> str:
    try:
        return ROLE_BADGE_COLORS[UserRole(role)]
    except ValueError:
        return "#8E8E93"


def get_role_display_name(role: UserRole | str) -> str:
    try:
        return ROLE_DISPLAY_NAMES[UserRole(role)]
    except ValueError:
        return str(role)


def validate_message_text(text: Optional[str]) -> dict[str, Any]:
    if not text or not text.strip():
        return {"valid": False, "error": "Message cannot be empty"}
    if len(text) > MAX_MESSAGE_TEXT:
        return {"valid": False, "error": f"Message is too long (max {MAX_MESSAGE_TEXT} characters)"}
    return {"valid": True}


def validate_attachment(uri: str, mime_type: str, size: int) -> dict[str, Any]:
    """Max 10 MB; JPEG, PNG, HEIC or PDF."""
    if size > MAX_ATTACHMENT_SIZE:
        return {"valid": False, "error": "File is too large (max 10MB)"}
    if mime_type not in ALLOWED_ATTACHMENT_TYPES:
        return {"valid": False, "error": "File type not supported"}
    return {"valid": True}


def _last_activity(conversation: Conversation) -> datetime:
    if conversation.last_message is not None:
        return conversation.last_message.created_at
    return conversation.updated_at


def sort_conversations_by_time(conversations: Iterable[Conversation]) -> list[Conversation]:
    """Newest activity first."""
    return sorted(conversations, key=_last_activity, reverse=True)


def filter_conversations(conversations: list[Conversation], query: str) -> list[Conversation]:
    """Case-insensitive match on participant names or the last message text."""
    if not query or not query.strip():
        return conversations
    needle = query.lower()
    return [
        c
        for c in conversations
        if any(needle in p.user_name.lower() for p in c.participants)
        or (c.last_message is not None and needle in c.last_message.text.lower())
    ]


def mark_messages_as_read(
    messages: Iterable[Message], current_user_id: str, now: Optional[datetime] = None
) -> list[Message]:
    """Copies with other senders' unread messages marked read."""
    read_at = now or datetime.now(timezone.utc)
    return [
        m.model_copy(update={"status": MessageStatus.READ, "read_at": read_at})
        if m.sender_id != current_user_id and m.status != MessageStatus.READ
        else m
        for m in messages
    ]


def get_quick_replies(role: UserRole | str) -> list[str]:
    try:
        return list(QUICK_REPLIES[UserRole(role)])
    except ValueError:
        return []
