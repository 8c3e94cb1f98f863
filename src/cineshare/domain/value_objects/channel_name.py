"""
Realtime channel names.
"""

from enum import Enum


class ChannelName(str, Enum):
    """Realtime channel namespaces exposed under /ws/{channel}."""

    NOTIFICATIONS = "notifications"
    PRESENCE = "presence"
    FEED = "feed"
    MESSAGES = "messages"
