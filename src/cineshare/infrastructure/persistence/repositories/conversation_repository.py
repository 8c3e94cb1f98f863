"""
Conversation and message repository implementations.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.domain.clock import utc_now
from cineshare.domain.entities import Conversation, Message
from cineshare.domain.entities.conversation import LAST_MESSAGE_PREVIEW_LENGTH
from cineshare.domain.exceptions import EntityNotFoundError
from cineshare.domain.repositories import (
    IConversationRepository,
    IMessageRepository,
)
from cineshare.infrastructure.persistence.models import (
    ConversationModel,
    MessageModel,
)


class ConversationRepository(IConversationRepository):
    """SQLAlchemy implementation of conversation repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        stmt = select(ConversationModel).where(ConversationModel.id == conversation_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def get_by_participants(
        self, participant_one_id: str, participant_two_id: str
    ) -> Optional[Conversation]:
        stmt = select(ConversationModel).where(
            ConversationModel.participant_one_id == participant_one_id,
            ConversationModel.participant_two_id == participant_two_id,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def create(self, conversation: Conversation) -> Conversation:
        """
        Insert a conversation, or return the existing one for the pair.

        Two first messages between the same users can race to create the
        row; the loser rolls back to a savepoint and reads the winner's.
        """
        model = ConversationModel(
            id=conversation.id,
            participant_one_id=conversation.participant_one_id,
            participant_two_id=conversation.participant_two_id,
            last_message=conversation.last_message,
            last_message_at=conversation.last_message_at,
            last_sequence=conversation.last_sequence,
            created_at=conversation.created_at,
        )

        try:
            async with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError:
            existing = await self.get_by_participants(
                conversation.participant_one_id, conversation.participant_two_id
            )
            if existing is None:
                raise
            return existing

        await self.session.refresh(model)
        return self._to_entity(model)

    async def reserve_sequence(
        self, conversation: Conversation, content: str
    ) -> Conversation:
        """
        Atomically increment the conversation sequence.

        A single UPDATE ... RETURNING keeps concurrent senders from reading
        the same sequence value.
        """
        sent_at = utc_now()
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation.id)
            .values(
                last_sequence=ConversationModel.last_sequence + 1,
                last_message=content[:LAST_MESSAGE_PREVIEW_LENGTH],
                last_message_at=sent_at,
            )
            .returning(ConversationModel.last_sequence)
        )
        result = await self.session.execute(stmt)
        sequence = result.scalar_one_or_none()

        if sequence is None:
            raise EntityNotFoundError("Conversation", conversation.id)

        conversation.last_sequence = sequence
        conversation.last_message = content[:LAST_MESSAGE_PREVIEW_LENGTH]
        conversation.last_message_at = sent_at
        return conversation

    def _to_entity(self, model: ConversationModel) -> Conversation:
        return Conversation(
            id=model.id,
            participant_one_id=model.participant_one_id,
            participant_two_id=model.participant_two_id,
            last_message=model.last_message,
            last_message_at=model.last_message_at,
            last_sequence=model.last_sequence,
            created_at=model.created_at,
        )


class MessageRepository(IMessageRepository):
    """SQLAlchemy implementation of message repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, message: Message) -> Message:
        model = MessageModel(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            recipient_id=message.recipient_id,
            content=message.content,
            sequence=message.sequence,
            read=message.read,
            created_at=message.created_at,
        )

        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        return self._to_entity(model)

    async def mark_read(self, conversation_id: str, recipient_id: str) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.recipient_id == recipient_id,
                MessageModel.read.is_(False),
            )
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    def _to_entity(self, model: MessageModel) -> Message:
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            sender_id=model.sender_id,
            recipient_id=model.recipient_id,
            content=model.content,
            sequence=model.sequence,
            read=model.read,
            created_at=model.created_at,
        )
