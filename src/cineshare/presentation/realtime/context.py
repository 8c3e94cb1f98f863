"""
Per-connection context handed to channel event handlers.
"""

from dataclasses import dataclass
from typing import Any

from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.domain.entities import Connection
from cineshare.domain.events.base import server_event


@dataclass
class ChannelContext:
    """
    Everything a handler needs to act for one socket.

    Attributes:
        connection: Registered connection of the socket
        user: Identity established at handshake
        container: DI container
    """

    connection: Connection
    user: AuthenticatedUser
    container: Container

    async def reply(self, event: str, data: Any = None) -> bool:
        """Send a frame back to this socket only."""
        return await self.container.connection_manager.send(
            self.connection.id, server_event(event, data)
        )
