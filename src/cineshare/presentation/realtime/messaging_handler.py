"""
Direct messaging channel event handler.
"""

from cineshare.application.use_cases import SendDirectMessageCommand
from cineshare.domain.events import (
    JoinConversationEvent,
    LeaveConversationEvent,
    MarkMessagesReadEvent,
    SendMessageEvent,
    TypingEvent,
)
from cineshare.domain.events.messaging import (
    JOINED_CONVERSATION,
    LEFT_CONVERSATION,
    MARKED_AS_READ,
    MESSAGES_READ,
)
from cineshare.domain.exceptions import ValidationError
from cineshare.domain.value_objects import ConversationRoom
from cineshare.presentation.realtime.context import ChannelContext


async def handle_messaging_event(event, ctx: ChannelContext) -> None:
    """
    Apply a messaging-channel event.

    Persistence happens in its own transaction, and realtime delivery
    only after it committed.

    Raises:
        ValidationError: Bad message content or typing outside a room
        EntityNotFoundError: Unknown conversation or recipient
    """
    container = ctx.container
    messaging = container.messaging_channel
    connection = ctx.connection

    if isinstance(event, JoinConversationEvent):
        async with container.database.session() as session:
            use_case = container.get_join_conversation_use_case(session)
            conversation = await use_case.execute(ctx.user.id, event.data)
        messaging.join(connection, conversation.id)
        await ctx.reply(JOINED_CONVERSATION, {"conversationId": conversation.id})

    elif isinstance(event, LeaveConversationEvent):
        room = ConversationRoom(event.data).name
        if room in connection.typing_rooms:
            await messaging.relay_typing(connection, event.data, False)
        messaging.leave(connection, event.data)
        await ctx.reply(LEFT_CONVERSATION, {"conversationId": event.data})

    elif isinstance(event, SendMessageEvent):
        async with container.database.session() as session:
            use_case = container.get_send_direct_message_use_case(session)
            message = await use_case.execute(
                SendDirectMessageCommand(
                    sender_id=ctx.user.id,
                    recipient_id=event.data.recipientId,
                    content=event.data.content,
                )
            )
        await messaging.deliver_message(message, sender_connection_id=connection.id)

    elif isinstance(event, TypingEvent):
        conversation_id = event.data.conversationId
        if not connection.is_in_room(ConversationRoom(conversation_id).name):
            raise ValidationError.single(
                "conversationId", "Join the conversation before sending typing events"
            )
        await messaging.relay_typing(connection, conversation_id, event.data.isTyping)

    elif isinstance(event, MarkMessagesReadEvent):
        async with container.database.session() as session:
            use_case = container.get_mark_conversation_read_use_case(session)
            count = await use_case.execute(ctx.user.id, event.data)
        await messaging.emit_to_room(
            event.data,
            MESSAGES_READ,
            {"conversationId": event.data, "userId": ctx.user.id},
            exclude_user_id=ctx.user.id,
        )
        await ctx.reply(MARKED_AS_READ, {"conversationId": event.data, "count": count})
