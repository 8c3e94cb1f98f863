"""
Realtime channel event handlers.
"""

from cineshare.domain.value_objects import ChannelName
from cineshare.presentation.realtime.context import ChannelContext
from cineshare.presentation.realtime.feed_handler import handle_feed_event
from cineshare.presentation.realtime.messaging_handler import handle_messaging_event
from cineshare.presentation.realtime.notifications_handler import (
    handle_notifications_event,
)
from cineshare.presentation.realtime.presence_handler import handle_presence_event

CHANNEL_HANDLERS = {
    ChannelName.NOTIFICATIONS: handle_notifications_event,
    ChannelName.PRESENCE: handle_presence_event,
    ChannelName.FEED: handle_feed_event,
    ChannelName.MESSAGES: handle_messaging_event,
}

__all__ = [
    "CHANNEL_HANDLERS",
    "ChannelContext",
]
