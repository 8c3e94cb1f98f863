"""
Presence status value object.
"""

from enum import Enum


class PresenceStatus(str, Enum):
    """Connection status of a user."""

    ONLINE = "online"
    AWAY = "away"
    OFFLINE = "offline"

    @classmethod
    def user_settable(cls) -> tuple:
        """Statuses a connected user may choose explicitly."""
        return (cls.ONLINE, cls.AWAY)
