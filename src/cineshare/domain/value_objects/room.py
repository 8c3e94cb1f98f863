"""
Conversation room value object.
"""

from dataclasses import dataclass

ROOM_PREFIX = "conversation:"


@dataclass(frozen=True)
class ConversationRoom:
    """
    Routing key grouping the connections joined to one conversation.

    Attributes:
        conversation_id: Conversation the room belongs to
    """

    conversation_id: str

    def __post_init__(self):
        if not self.conversation_id or not self.conversation_id.strip():
            raise ValueError("Conversation ID cannot be empty")

    @property
    def name(self) -> str:
        return f"{ROOM_PREFIX}{self.conversation_id}"

    def __str__(self) -> str:
        return self.name
