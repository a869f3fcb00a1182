"""Per-claim conversations and messages with debounced persistence."""

import json
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from collision_claims.config.settings import (
    CONVERSATIONS_STORAGE_KEY,
    MESSAGES_STORAGE_KEY,
    get_repository_config,
)
from collision_claims.db.database import KeyValueStore, SqliteKeyValueStore
from collision_claims.exceptions import StorageError
from collision_claims.models.claim import UserRole
from collision_claims.models.messaging import (
    Conversation,
    ConversationParticipant,
    Message,
    MessageAttachment,
    MessageStatus,
)
from collision_claims.observability import get_logger, log_claim_event
from collision_claims.services.notifications import NotificationService
from collision_claims.tools.messaging import (
    get_message_preview,
    get_unread_count_for_user,
    validate_message_text,
)
from collision_claims.utils.random_source import short_id
from collision_claims.utils.sanitization import MAX_MESSAGE_TEXT, sanitize_text

logger = get_logger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{short_id()[:6]}"


class MessagingService:
    """Conversations keyed by claim, plus their message lists.

    State lives in memory and is written back under two storage keys
    (conversations, messages) after a short debounce, or on flush().
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        notifications: Optional[NotificationService] = None,
        flush_interval: Optional[float] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._store = store if store is not None else SqliteKeyValueStore()
        self._notifications = notifications
        self._flush_interval = (
            get_repository_config()["messages_flush_interval"]
            if flush_interval is None
            else flush_interval
        )
        self._clock = clock
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._dirty = False
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[str, list[Message]] = {}
        self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read_json(self, key: str) -> Any:
        try:
            raw = self._store.get(key)
        except Exception as e:
            logger.error("Failed to load messages: %s", e, exc_info=True)
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Failed to load messages: invalid JSON under %s (%s)", key, e)
            return None

    def _load(self) -> None:
        conversations = self._read_json(CONVERSATIONS_STORAGE_KEY) or []
        messages = self._read_json(MESSAGES_STORAGE_KEY) or {}
        try:
            for item in conversations:
                conversation = Conversation.model_validate(item)
                self._conversations[conversation.id] = conversation
            for conversation_id, items in messages.items():
                self._messages[conversation_id] = [Message.model_validate(m) for m in items]
        except (ValidationError, AttributeError, TypeError) as e:
            logger.error("Failed to load messages: %s", e)
            self._conversations = {}
            self._messages = {}

    def flush(self) -> None:
        """Write conversations and messages if anything changed.

        Raises:
            StorageError: the store rejected a write; changes stay pending.
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if not self._dirty:
                return
            conversations = json.dumps(
                [c.model_dump(mode="json") for c in self._conversations.values()]
            )
            messages = json.dumps(
                {
                    cid: [m.model_dump(mode="json") for m in items]
                    for cid, items in self._messages.items()
                }
            )
            try:
                self._store.set(CONVERSATIONS_STORAGE_KEY, conversations)
                self._store.set(MESSAGES_STORAGE_KEY, messages)
            except Exception as e:
                logger.error("Failed to save messages: %s", e, exc_info=True)
                raise StorageError(f"Failed to save messages: {e}") from e
            self._dirty = False

    def close(self) -> None:
        self.flush()

    def _mark_dirty(self) -> None:
        with self._lock:
            self._dirty = True
        if self._flush_interval <= 0:
            self.flush()
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self._flush_interval, self._flush_from_timer)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _flush_from_timer(self) -> None:
        try:
            self.flush()
        except StorageError:
            logger.debug("Deferred message flush failed; changes kept in memory")

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    @property
    def conversations(self) -> list[Conversation]:
        with self._lock:
            return list(self._conversations.values())

    def create_conversation(
        self,
        claim_id: str,
        participants: list[ConversationParticipant | dict[str, Any]],
    ) -> Conversation:
        """Return the claim's conversation, creating it on first use."""
        with self._lock:
            existing = self.get_conversation_by_claim_id(claim_id)
            if existing is not None:
                return existing
            now = self._clock()
            conversation = Conversation(
                id=_new_id("conv"),
                claim_id=claim_id,
                participants=[ConversationParticipant.model_validate(p) for p in participants],
                created_at=now,
                updated_at=now,
            )
            self._conversations[conversation.id] = conversation
        log_claim_event(
            logger, "conversation_created", claim_id=claim_id, conversation_id=conversation.id
        )
        self._mark_dirty()
        return conversation

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        with self._lock:
            return self._conversations.get(conversation_id)

    def get_conversation_by_claim_id(self, claim_id: str) -> Optional[Conversation]:
        with self._lock:
            return next((c for c in self._conversations.values() if c.claim_id == claim_id), None)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def send_message(
        self,
        conversation_id: str,
        sender_id: str,
        sender_role: UserRole,
        sender_name: str,
        text: str,
        attachments: Optional[list[MessageAttachment]] = None,
    ) -> Message:
        """Append a message, bump other participants' unread counts, and notify them.

        Raises:
            KeyError: unknown conversation.
            ValueError: empty text with no attachments, or text over the length limit.
        """
        if not attachments:
            check = validate_message_text(text)
            if not check["valid"]:
                raise ValueError(check["error"])
        elif len(text or "") > MAX_MESSAGE_TEXT:
            raise ValueError(f"Message is too long (max {MAX_MESSAGE_TEXT} characters)")

        now = self._clock()
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                raise KeyError(f"Conversation not found: {conversation_id}")
            message = Message(
                id=_new_id("msg"),
                conversation_id=conversation_id,
                sender_id=sender_id,
                sender_role=UserRole(sender_role),
                sender_name=sender_name,
                text=sanitize_text(text, MAX_MESSAGE_TEXT),
                attachments=list(attachments or []),
                status=MessageStatus.SENT,
                created_at=now,
            )
            self._messages.setdefault(conversation_id, []).append(message)

            unread = dict(conversation.unread_count)
            recipients = [p for p in conversation.participants if p.user_id != sender_id]
            for participant in recipients:
                unread[participant.user_id] = unread.get(participant.user_id, 0) + 1
            self._conversations[conversation_id] = conversation.model_copy(
                update={"last_message": message, "unread_count": unread, "updated_at": now}
            )

        self._mark_dirty()
        for participant in recipients:
            self._notify(participant, message)
        return message

    def _notify(self, participant: ConversationParticipant, message: Message) -> None:
        if self._notifications is None:
            return
        try:
            self._notifications.notify_new_message(
                message.sender_name,
                get_message_preview(message),
                message.conversation_id,
                user_id=participant.user_id,
            )
        except Exception as e:
            logger.error("Failed to send notification: %s", e)

    def get_messages(self, conversation_id: str) -> list[Message]:
        with self._lock:
            return list(self._messages.get(conversation_id, []))

    def mark_as_read(self, conversation_id: str, user_id: str) -> None:
        """Mark everyone else's unread messages read and zero the user's unread count."""
        now = self._clock()
        with self._lock:
            self._messages[conversation_id] = [
                m.model_copy(update={"status": MessageStatus.READ, "read_at": now})
                if m.sender_id != user_id and m.read_at is None
                else m
                for m in self._messages.get(conversation_id, [])
            ]
            conversation = self._conversations.get(conversation_id)
            if conversation is not None:
                self._conversations[conversation_id] = conversation.model_copy(
                    update={
                        "unread_count": {**conversation.unread_count, user_id: 0},
                        "updated_at": now,
                    }
                )
        self._mark_dirty()

    def get_unread_count(self, conversation_id: str, user_id: str) -> int:
        conversation = self.get_conversation(conversation_id)
        if conversation is None:
            return 0
        return get_unread_count_for_user(conversation, user_id)

    def get_total_unread_count(self, user_id: str) -> int:
        return sum(get_unread_count_for_user(c, user_id) for c in self.conversations)

    def add_attachment(self, message_id: str, attachment: MessageAttachment) -> bool:
        """Attach a file to an existing message. Returns False if no message has that ID."""
        found = False
        with self._lock:
            for conversation_id, items in self._messages.items():
                for index, message in enumerate(items):
                    if message.id == message_id:
                        items[index] = message.model_copy(
                            update={"attachments": [*message.attachments, attachment]}
                        )
                        found = True
        if found:
            self._mark_dirty()
        return found
