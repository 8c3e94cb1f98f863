"""
Send direct message use case.

Validates and persists a direct message. Delivery to live sockets is
done by the caller once the transaction has committed.
"""

from dataclasses import dataclass

from cineshare.domain.entities import Conversation, Message
from cineshare.domain.exceptions import (
    EntityNotFoundError,
    FieldError,
    ValidationError,
)
from cineshare.domain.repositories import (
    IConversationRepository,
    IMessageRepository,
    IUserRepository,
)

DEFAULT_MAX_MESSAGE_LENGTH = 5000


@dataclass
class SendDirectMessageCommand:
    """Command to send a message to another user."""

    sender_id: str
    recipient_id: str
    content: str


class SendDirectMessage:
    """
    Use case for sending a direct message.

    The conversation is found by its sorted participant pair and created
    on the first message. Each message takes the next sequence number of
    its conversation.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        conversation_repository: IConversationRepository,
        message_repository: IMessageRepository,
        max_message_length: int = DEFAULT_MAX_MESSAGE_LENGTH,
    ):
        """
        Initialize use case.

        Args:
            user_repository: User repository
            conversation_repository: Conversation repository
            message_repository: Message repository
            max_message_length: Max characters after trimming
        """
        self.user_repository = user_repository
        self.conversation_repository = conversation_repository
        self.message_repository = message_repository
        self.max_message_length = max_message_length

    def _validate(self, command: SendDirectMessageCommand) -> str:
        errors = []
        recipient_id = (command.recipient_id or "").strip()
        content = (command.content or "").strip()

        if not recipient_id:
            errors.append(FieldError("recipientId", "Recipient is required"))
        elif recipient_id == command.sender_id:
            errors.append(
                FieldError("recipientId", "Cannot send a message to yourself")
            )

        if not content:
            errors.append(FieldError("content", "Message content cannot be empty"))
        elif len(content) > self.max_message_length:
            errors.append(
                FieldError(
                    "content",
                    f"Message content cannot exceed "
                    f"{self.max_message_length} characters",
                )
            )

        if errors:
            raise ValidationError(errors)
        return content

    async def execute(self, command: SendDirectMessageCommand) -> Message:
        """
        Send message.

        Args:
            command: Sender, recipient and raw content

        Returns:
            Persisted message carrying its sequence number

        Raises:
            ValidationError: Empty or oversized content, missing or self
                recipient
            EntityNotFoundError: If the recipient does not exist
        """
        content = self._validate(command)
        recipient_id = command.recipient_id.strip()

        recipient = await self.user_repository.get_by_id(recipient_id)
        if not recipient:
            raise EntityNotFoundError("User", recipient_id)

        participant_one, participant_two = Conversation.ordered_participants(
            command.sender_id, recipient_id
        )
        conversation = await self.conversation_repository.get_by_participants(
            participant_one, participant_two
        )
        if not conversation:
            conversation = await self.conversation_repository.create(
                Conversation(
                    participant_one_id=participant_one,
                    participant_two_id=participant_two,
                )
            )

        conversation = await self.conversation_repository.reserve_sequence(
            conversation, content
        )

        message = Message(
            conversation_id=conversation.id,
            sender_id=command.sender_id,
            recipient_id=recipient_id,
            content=content,
            sequence=conversation.last_sequence,
        )
        return await self.message_repository.create(message)
