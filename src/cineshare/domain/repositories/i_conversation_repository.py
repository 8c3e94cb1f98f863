"""
Conversation and message repository interfaces.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cineshare.domain.entities import Conversation, Message


class IConversationRepository(ABC):
    """Interface for conversation persistence operations."""

    @abstractmethod
    async def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        """Get conversation by ID."""

    @abstractmethod
    async def get_by_participants(
        self, participant_one_id: str, participant_two_id: str
    ) -> Optional[Conversation]:
        """
        Get conversation for an ordered participant pair.

        Args:
            participant_one_id: Lower participant ID
            participant_two_id: Higher participant ID
        """

    @abstractmethod
    async def create(self, conversation: Conversation) -> Conversation:
        """Create a conversation; an existing one for the same pair is returned."""

    @abstractmethod
    async def reserve_sequence(
        self, conversation: Conversation, content: str
    ) -> Conversation:
        """
        Advance the conversation's message sequence and preview.

        Must be executed inside the transaction that stores the message so
        that sequence numbers are unique per conversation.

        Returns:
            Conversation with `last_sequence` set to the new message's number
        """


class IMessageRepository(ABC):
    """Interface for direct message persistence operations."""

    @abstractmethod
    async def create(self, message: Message) -> Message:
        """Persist a message."""

    @abstractmethod
    async def mark_read(self, conversation_id: str, recipient_id: str) -> int:
        """
        Mark messages addressed to `recipient_id` as read.

        Returns:
            Number of messages updated
        """
