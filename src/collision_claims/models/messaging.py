"""Pydantic models for claim conversations, messages, and notifications."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from collision_claims.models.claim import UserRole


class MessageStatus(str, Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class AttachmentType(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    PDF = "pdf"


class MessageAttachment(BaseModel):
    id: str = Field(..., description="Attachment ID")
    uri: str = Field(..., description="File reference")
    name: str = Field(..., description="File name")
    type: AttachmentType = Field(..., description="Attachment kind")
    size: int = Field(default=0, description="Size in bytes")
    uploaded_at: datetime = Field(..., description="Upload time")


class Message(BaseModel):
    id: str = Field(..., description="Message ID")
    conversation_id: str = Field(..., description="Conversation ID")
    sender_id: str = Field(..., description="Sender user ID")
    sender_role: UserRole = Field(..., description="Sender role")
    sender_name: str = Field(..., description="Sender display name")
    text: str = Field(default="", description="Message body")
    attachments: list[MessageAttachment] = Field(default_factory=list)
    status: MessageStatus = Field(default=MessageStatus.SENT)
    created_at: datetime = Field(..., description="Send time")
    read_at: Optional[datetime] = Field(default=None)


class ConversationParticipant(BaseModel):
    user_id: str
    user_name: str
    user_role: UserRole


class Conversation(BaseModel):
    """Chat thread attached to one claim."""

    id: str = Field(..., description="Conversation ID")
    claim_id: str = Field(..., description="Related claim ID")
    participants: list[ConversationParticipant] = Field(default_factory=list)
    last_message: Optional[Message] = Field(default=None)
    unread_count: dict[str, int] = Field(
        default_factory=dict, description="Unread message count per participant user ID"
    )
    created_at: datetime
    updated_at: datetime


class NotificationType(str, Enum):
    CLAIM_SUBMITTED = "claim_submitted"
    CLAIM_APPROVED = "claim_approved"
    CLAIM_REJECTED = "claim_rejected"
    MESSAGE_RECEIVED = "message_received"
    ESTIMATE_READY = "estimate_ready"
    SUPPLEMENT_NEEDED = "supplement_needed"
    PAYMENT_DUE = "payment_due"
    PAYMENT_RECEIVED = "payment_received"


class NotificationTemplate(BaseModel):
    """Rendered notification content."""

    type: NotificationType
    title: str
    body: str
    priority: Literal["high", "normal", "low"] = "normal"
    sound: Optional[str] = Field(default=None, description="Sound name, e.g. default or success")
    vibrate: bool = False
    badge: Optional[int] = None
    data: dict[str, Any] = Field(default_factory=dict)


class QuietHours(BaseModel):
    enabled: bool = False
    start: int = Field(default=22, ge=0, le=23, description="Start hour")
    end: int = Field(default=8, ge=0, le=23, description="End hour")


class NotificationPreferences(BaseModel):
    enabled: bool = True
    types: dict[NotificationType, bool] = Field(
        default_factory=lambda: {t: True for t in NotificationType}
    )
    quiet_hours: Optional[QuietHours] = Field(default_factory=QuietHours)
    sound: bool = True
    vibrate: bool = True
    badge: bool = True


class Notification(BaseModel):
    """In-app notification record for a user."""

    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    claim_id: Optional[str] = None
    conversation_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime
    read_at: Optional[datetime] = None
