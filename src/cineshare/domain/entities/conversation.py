"""
Conversation and message entities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple
from uuid import uuid4

from cineshare.domain.clock import utc_now

LAST_MESSAGE_PREVIEW_LENGTH = 100


@dataclass
class Conversation:
    """
    Two-party conversation.

    Participants are stored in sorted order so that a pair of users maps
    to exactly one conversation regardless of who writes first.
    `last_sequence` is the sequence number of the newest message.
    """

    participant_one_id: str
    participant_two_id: str
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    last_sequence: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    @staticmethod
    def ordered_participants(user_a: str, user_b: str) -> Tuple[str, str]:
        if user_a == user_b:
            raise ValueError("A conversation needs two distinct participants")
        first, second = sorted((user_a, user_b))
        return first, second

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.participant_one_id, self.participant_two_id)

    def other_participant(self, user_id: str) -> str:
        if user_id == self.participant_one_id:
            return self.participant_two_id
        return self.participant_one_id

    def record_message(self, content: str, sent_at: datetime) -> int:
        """Advance the sequence for a new message and return it."""
        self.last_sequence += 1
        self.last_message = content[:LAST_MESSAGE_PREVIEW_LENGTH]
        self.last_message_at = sent_at
        return self.last_sequence


@dataclass
class Message:
    """Direct message persisted inside a conversation."""

    conversation_id: str
    sender_id: str
    recipient_id: str
    content: str
    sequence: int
    read: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def to_event(self) -> dict:
        """Payload of the `newMessage` event."""
        return {
            "id": self.id,
            "conversationId": self.conversation_id,
            "senderId": self.sender_id,
            "recipientId": self.recipient_id,
            "content": self.content,
            "sequence": self.sequence,
            "read": self.read,
            "createdAt": self.created_at.isoformat(),
        }
