"""
Conversation access use cases: join a room, mark messages as read.
"""

from cineshare.domain.entities import Conversation
from cineshare.domain.exceptions import EntityNotFoundError
from cineshare.domain.repositories import IConversationRepository, IMessageRepository


async def _load_for_participant(
    conversation_repository: IConversationRepository,
    conversation_id: str,
    user_id: str,
) -> Conversation:
    conversation = await conversation_repository.get_by_id(conversation_id)
    # Non-participants get the same answer as for a missing conversation
    if not conversation or not conversation.has_participant(user_id):
        raise EntityNotFoundError("Conversation", conversation_id)
    return conversation


class JoinConversation:
    """Checks that a user may join the room of a conversation."""

    def __init__(self, conversation_repository: IConversationRepository):
        self.conversation_repository = conversation_repository

    async def execute(self, user_id: str, conversation_id: str) -> Conversation:
        """
        Raises:
            EntityNotFoundError: Unknown conversation or not a participant
        """
        return await _load_for_participant(
            self.conversation_repository, conversation_id, user_id
        )


class MarkConversationRead:
    """Marks the messages addressed to a user in a conversation as read."""

    def __init__(
        self,
        conversation_repository: IConversationRepository,
        message_repository: IMessageRepository,
    ):
        self.conversation_repository = conversation_repository
        self.message_repository = message_repository

    async def execute(self, user_id: str, conversation_id: str) -> int:
        """
        Returns:
            Number of messages that changed to read

        Raises:
            EntityNotFoundError: Unknown conversation or not a participant
        """
        await _load_for_participant(
            self.conversation_repository, conversation_id, user_id
        )
        return await self.message_repository.mark_read(conversation_id, user_id)
