"""
WebSocket connection manager infrastructure with production logging.
"""

from typing import Any, Dict, Iterable, List, Optional, Set

from fastapi import WebSocket
from shared.reporter import Emoji, SystemReporter

from cineshare.domain.entities import Connection
from cineshare.domain.value_objects import ChannelName


class ConnectionLimitExceeded(Exception):
    """Raised when connection limit is exceeded."""

    def __init__(self, message: str, limit_type: str):
        super().__init__(message)
        self.limit_type = limit_type


class ConnectionManager:
    """
    Tracks live sockets per channel and per user.

    Connections are keyed by their connection ID. Each channel keeps an
    index from user ID to that user's connection IDs so that per-user
    fan-out never scans the whole channel.
    """

    def __init__(
        self,
        max_connections_per_user: int = 0,
        reporter: Optional[SystemReporter] = None,
    ):
        self.connections: Dict[str, Connection] = {}
        self.sockets: Dict[str, WebSocket] = {}
        self.channels: Dict[str, Dict[str, Set[str]]] = {
            channel.value: {} for channel in ChannelName
        }
        self.max_connections_per_user = max_connections_per_user
        self.reporter = reporter

        if self.reporter:
            self.reporter.info(
                f"ConnectionManager initialized "
                f"(limits: per_user={max_connections_per_user})",
                context="ConnectionManager",
                verbose_level=2,
            )

    def check_connection_limits(self, channel: str, user_id: str) -> None:
        """Check if a new connection would exceed the per-user limit."""
        if self.max_connections_per_user <= 0:
            return

        user_count = len(self.channels.get(channel, {}).get(user_id, ()))
        if user_count >= self.max_connections_per_user:
            if self.reporter:
                self.reporter.warning(
                    f"{Emoji.ERROR.ERROR} Per-user connection limit exceeded "
                    f"(user={user_id}, channel={channel}, current={user_count}, "
                    f"limit={self.max_connections_per_user})",
                    context="ConnectionManager",
                    verbose_level=1,
                )
            raise ConnectionLimitExceeded(
                f"User connection limit reached: {self.max_connections_per_user}",
                limit_type="per_user",
            )

    def add(
        self,
        websocket: WebSocket,
        channel: str,
        user_id: str,
        connection_id: Optional[str] = None,
    ) -> Connection:
        """
        Register an accepted socket.

        Raises:
            ValueError: Unknown channel
            ConnectionLimitExceeded: Per-user limit reached
        """
        channel = ChannelName(channel).value
        self.check_connection_limits(channel, user_id)

        connection = Connection(
            user_id=user_id,
            channel=channel,
            connection_id=connection_id,
        )

        self.connections[connection.id] = connection
        self.sockets[connection.id] = websocket
        self.channels[channel].setdefault(user_id, set()).add(connection.id)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.CONNECTED} Connection added: channel={channel}, "
                f"conn={connection.id}, user={user_id}, "
                f"channel_conns={self.get_channel_count(channel)}, "
                f"total={self.get_total_connections()}",
                context="ConnectionManager",
                verbose_level=2,
            )

        return connection

    def remove(self, connection_id: str) -> Optional[Connection]:
        """Unregister a connection. Unknown IDs are ignored."""
        connection = self.connections.pop(connection_id, None)
        self.sockets.pop(connection_id, None)

        if connection is None:
            return None

        users = self.channels.get(connection.channel, {})
        user_conns = users.get(connection.user_id)
        if user_conns is not None:
            user_conns.discard(connection_id)
            if not user_conns:
                del users[connection.user_id]

        if self.reporter:
            self.reporter.info(
                f"{Emoji.NETWORK.DISCONNECT} Connection removed: "
                f"channel={connection.channel}, conn={connection_id}, "
                f"user={connection.user_id}, total={self.get_total_connections()}",
                context="ConnectionManager",
                verbose_level=2,
            )

        return connection

    def get(self, connection_id: str) -> Optional[Connection]:
        return self.connections.get(connection_id)

    def get_socket(self, connection_id: str) -> Optional[WebSocket]:
        return self.sockets.get(connection_id)

    def connections_for_user(self, channel: str, user_id: str) -> List[Connection]:
        """Live connections of one user on one channel."""
        conn_ids = self.channels.get(channel, {}).get(user_id, ())
        return [self.connections[c] for c in conn_ids if c in self.connections]

    def channel_connections(self, channel: str) -> List[Connection]:
        """All live connections on a channel."""
        return [
            self.connections[c]
            for conn_ids in self.channels.get(channel, {}).values()
            for c in conn_ids
            if c in self.connections
        ]

    def room_members(self, channel: str, room: str) -> List[Connection]:
        """Connections of a channel that joined `room`."""
        return [c for c in self.channel_connections(channel) if c.is_in_room(room)]

    async def send(self, connection_id: str, frame: Dict[str, Any]) -> bool:
        """
        Send a frame to one connection.

        Returns:
            True if sent, False if the socket is gone or the write failed
        """
        websocket = self.sockets.get(connection_id)
        if websocket is None:
            return False

        try:
            await websocket.send_json(frame)
            return True
        except Exception as e:
            if self.reporter:
                self.reporter.warning(
                    f"Send failed [conn={connection_id}]: {type(e).__name__}: {e}",
                    context="ConnectionManager",
                    verbose_level=2,
                )
            # Dead socket, the receive loop will finish its own cleanup
            self.remove(connection_id)
            return False

    async def send_many(
        self, connections: Iterable[Connection], frame: Dict[str, Any]
    ) -> int:
        """
        Send a frame to several connections, each at most once.

        Returns:
            Number of connections the frame was written to
        """
        sent = 0
        seen: Set[str] = set()
        for connection in connections:
            if connection.id in seen:
                continue
            seen.add(connection.id)
            if await self.send(connection.id, frame):
                sent += 1
        return sent

    def get_total_connections(self) -> int:
        return len(self.connections)

    def get_channel_count(self, channel: str) -> int:
        return sum(len(c) for c in self.channels.get(channel, {}).values())

    def get_user_connection_count(self, user_id: str) -> int:
        return sum(len(users.get(user_id, ())) for users in self.channels.values())

    def get_all_channels(self) -> Dict[str, int]:
        """Get all channels with connection counts."""
        return {channel: self.get_channel_count(channel) for channel in self.channels}
