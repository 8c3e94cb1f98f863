"""
Direct messaging channel - conversation rooms and typing indicators.
"""

from typing import Any, Optional

from shared.reporter import Emoji, SystemReporter

from cineshare.domain.entities import Connection, Message
from cineshare.domain.events.base import server_event
from cineshare.domain.events.messaging import (
    MESSAGE_SENT,
    NEW_MESSAGE,
    NEW_MESSAGE_NOTIFICATION,
    USER_TYPING,
)
from cineshare.domain.value_objects import ChannelName, ConversationRoom
from cineshare.infrastructure.realtime.connection_manager import ConnectionManager


class MessagingChannel:
    """
    Routes direct messages and typing indicators to conversation rooms.

    Room membership is held on each Connection and lives only as long as
    the socket. A socket that closes while flagged as typing in a room
    produces a final `userTyping` with isTyping=false for that room.
    """

    channel = ChannelName.MESSAGES.value

    def __init__(
        self,
        connection_manager: ConnectionManager,
        reporter: Optional[SystemReporter] = None,
    ):
        self.connection_manager = connection_manager
        self.reporter = reporter

    def join(self, connection: Connection, conversation_id: str) -> bool:
        """Join a conversation room. Idempotent; False if already joined."""
        room = ConversationRoom(conversation_id).name
        joined = connection.join_room(room)

        if joined and self.reporter:
            self.reporter.debug(
                f"User {connection.user_id} joined {room} [conn={connection.id}]",
                context="MessagingChannel",
            )
        return joined

    def leave(self, connection: Connection, conversation_id: str) -> bool:
        """Leave a conversation room. Idempotent; False if not a member."""
        room = ConversationRoom(conversation_id).name
        return connection.leave_room(room)

    async def emit_to_room(
        self,
        conversation_id: str,
        event: str,
        data: Any,
        exclude_user_id: Optional[str] = None,
    ) -> int:
        """
        Emit an event to every connection joined to a conversation room.

        Args:
            conversation_id: Target conversation
            event: Event name
            data: Event payload
            exclude_user_id: Skip connections of this user

        Returns:
            Number of sockets written to
        """
        room = ConversationRoom(conversation_id).name
        members = [
            c
            for c in self.connection_manager.room_members(self.channel, room)
            if c.user_id != exclude_user_id
        ]
        return await self.connection_manager.send_many(
            members, server_event(event, data)
        )

    async def deliver_message(
        self, message: Message, sender_connection_id: Optional[str] = None
    ) -> int:
        """
        Deliver a persisted message.

        Emits `newMessage` to the conversation room, `newMessageNotification`
        to every messaging socket of the recipient and `messageSent` back to
        the sending socket.

        Returns:
            Number of room sockets that received `newMessage`
        """
        payload = message.to_event()

        delivered = await self.emit_to_room(message.conversation_id, NEW_MESSAGE, payload)

        recipient_connections = self.connection_manager.connections_for_user(
            self.channel, message.recipient_id
        )
        await self.connection_manager.send_many(
            recipient_connections,
            server_event(
                NEW_MESSAGE_NOTIFICATION,
                {"conversationId": message.conversation_id, "message": payload},
            ),
        )

        if sender_connection_id:
            await self.connection_manager.send(
                sender_connection_id, server_event(MESSAGE_SENT, payload)
            )

        if self.reporter:
            self.reporter.info(
                f"{Emoji.MESSAGE.DIRECT} Message #{message.sequence} in "
                f"{message.conversation_id}: {message.sender_id} -> "
                f"{message.recipient_id} [room_sockets={delivered}, "
                f"recipient_sockets={len(recipient_connections)}]",
                context="MessagingChannel",
                verbose_level=2,
            )
        return delivered

    async def relay_typing(
        self, connection: Connection, conversation_id: str, is_typing: bool
    ) -> int:
        """
        Relay a typing indicator to the other users in the room.

        The last reported state is remembered on the connection so a
        disconnect can clear it.
        """
        room = ConversationRoom(conversation_id).name
        connection.set_typing(room, is_typing)

        return await self.emit_to_room(
            conversation_id,
            USER_TYPING,
            {
                "userId": connection.user_id,
                "conversationId": conversation_id,
                "isTyping": is_typing,
            },
            exclude_user_id=connection.user_id,
        )

    async def on_disconnect(self, connection: Connection) -> int:
        """
        Clear typing state of a closing connection.

        Returns:
            Number of rooms that received an implicit isTyping=false
        """
        cleared = 0
        for room in sorted(connection.typing_rooms):
            conversation_id = room.split(":", 1)[1]
            connection.set_typing(room, False)
            await self.emit_to_room(
                conversation_id,
                USER_TYPING,
                {
                    "userId": connection.user_id,
                    "conversationId": conversation_id,
                    "isTyping": False,
                },
                exclude_user_id=connection.user_id,
            )
            cleared += 1

        if cleared and self.reporter:
            self.reporter.debug(
                f"{Emoji.MESSAGE.TYPING} Cleared typing in {cleared} room(s) "
                f"[conn={connection.id}]",
                context="MessagingChannel",
            )

        connection.rooms.clear()
        return cleared
