"""
Realtime infrastructure: socket registry, presence and channels.
"""

from cineshare.infrastructure.realtime.connection_manager import (
    ConnectionLimitExceeded,
    ConnectionManager,
)
from cineshare.infrastructure.realtime.feed_channel import FeedChannel
from cineshare.infrastructure.realtime.messaging_channel import MessagingChannel
from cineshare.infrastructure.realtime.notification_channel import (
    NotificationChannel,
)
from cineshare.infrastructure.realtime.presence_registry import PresenceRegistry

__all__ = [
    "ConnectionLimitExceeded",
    "ConnectionManager",
    "FeedChannel",
    "MessagingChannel",
    "NotificationChannel",
    "PresenceRegistry",
]
