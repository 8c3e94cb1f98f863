"""
Direct messaging channel events.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cineshare.domain.events.base import ClientEvent, NonEmptyStr


class SendMessagePayload(BaseModel):
    """Message to deliver. Content rules are enforced by the use case."""

    model_config = ConfigDict(extra="forbid")

    recipientId: str
    content: str


class TypingPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    conversationId: NonEmptyStr
    isTyping: bool


class JoinConversationEvent(ClientEvent):
    event: Literal["joinConversation"]
    data: NonEmptyStr


class LeaveConversationEvent(ClientEvent):
    event: Literal["leaveConversation"]
    data: NonEmptyStr


class SendMessageEvent(ClientEvent):
    event: Literal["sendMessage"]
    data: SendMessagePayload


class TypingEvent(ClientEvent):
    event: Literal["typing"]
    data: TypingPayload


class MarkMessagesReadEvent(ClientEvent):
    """Mark all messages addressed to the caller in a conversation as read."""

    event: Literal["markAsRead"]
    data: NonEmptyStr


MessagingClientEvent = Annotated[
    Union[
        JoinConversationEvent,
        LeaveConversationEvent,
        SendMessageEvent,
        TypingEvent,
        MarkMessagesReadEvent,
    ],
    Field(discriminator="event"),
]

# Server -> client
NEW_MESSAGE = "newMessage"
NEW_MESSAGE_NOTIFICATION = "newMessageNotification"
MESSAGE_SENT = "messageSent"
MESSAGES_READ = "messagesRead"
USER_TYPING = "userTyping"
JOINED_CONVERSATION = "conversationJoined"
LEFT_CONVERSATION = "conversationLeft"
MARKED_AS_READ = "markedAsRead"
