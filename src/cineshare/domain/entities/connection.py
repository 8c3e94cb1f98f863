"""
Connection entity - represents one authenticated realtime socket.
"""

import uuid
from datetime import datetime
from typing import Optional, Set

from cineshare.domain.clock import utc_now


def generate_connection_id() -> str:
    """Generate unique connection ID for tracking."""
    return f"conn_{uuid.uuid4().hex[:12]}"


class Connection:
    """
    Connection entity representing a WebSocket on one channel.

    Room membership, typing flags and feed subscriptions live on the
    connection and disappear with it; a reconnecting client starts empty.

    Attributes:
        id: Unique connection identifier
        user_id: Authenticated user ID
        channel: Channel name the socket is attached to
        connected_at: Connection timestamp
        rooms: Joined conversation room names
        typing_rooms: Rooms where this connection last reported typing
        feed_subscriptions: User IDs whose feed this connection follows
    """

    def __init__(
        self,
        user_id: str,
        channel: str,
        connection_id: Optional[str] = None,
        connected_at: Optional[datetime] = None,
    ):
        self.id: str = connection_id or generate_connection_id()
        self.user_id: str = user_id
        self.channel: str = channel
        self.connected_at: datetime = connected_at or utc_now()
        self.rooms: Set[str] = set()
        self.typing_rooms: Set[str] = set()
        self.feed_subscriptions: Set[str] = set()

    def join_room(self, room: str) -> bool:
        """Join room. Returns False when already a member."""
        if room in self.rooms:
            return False
        self.rooms.add(room)
        return True

    def leave_room(self, room: str) -> bool:
        """Leave room. Returns False when not a member."""
        if room not in self.rooms:
            return False
        self.rooms.discard(room)
        self.typing_rooms.discard(room)
        return True

    def is_in_room(self, room: str) -> bool:
        return room in self.rooms

    def set_typing(self, room: str, is_typing: bool) -> None:
        if is_typing:
            self.typing_rooms.add(room)
        else:
            self.typing_rooms.discard(room)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Connection):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"Connection(id={self.id}, channel={self.channel}, "
            f"user_id={self.user_id}, rooms={len(self.rooms)})"
        )
