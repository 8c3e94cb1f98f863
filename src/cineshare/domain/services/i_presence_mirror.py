"""
Presence mirror interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from cineshare.domain.value_objects import PresenceStatus


class IPresenceMirror(ABC):
    """
    Out-of-process copy of user presence.

    Lets other processes read a user's last known status. Writes expire
    after a TTL so crashed processes do not leave users online forever.
    """

    @abstractmethod
    async def write(
        self, user_id: str, status: PresenceStatus, last_seen: datetime
    ) -> None:
        """Store the latest status of a user."""

    @abstractmethod
    async def read(self, user_id: str) -> Optional[dict]:
        """
        Read the stored status of a user.

        Returns:
            {"status": PresenceStatus, "lastSeen": iso string} or None
        """

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""
