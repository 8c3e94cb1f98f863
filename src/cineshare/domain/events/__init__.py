"""
Realtime event schemas.
"""

from cineshare.domain.events.base import ClientEvent, error_event, server_event
from cineshare.domain.events.feed import (
    FeedClientEvent,
    SubscribeFeedEvent,
    UnsubscribeFeedEvent,
)
from cineshare.domain.events.messaging import (
    JoinConversationEvent,
    LeaveConversationEvent,
    MarkMessagesReadEvent,
    MessagingClientEvent,
    SendMessageEvent,
    SendMessagePayload,
    TypingEvent,
    TypingPayload,
)
from cineshare.domain.events.notifications import (
    MarkAllNotificationsReadEvent,
    MarkNotificationReadEvent,
    NotificationClientEvent,
)
from cineshare.domain.events.presence import (
    CheckUsersStatusEvent,
    GetOnlineUsersEvent,
    PresenceClientEvent,
    UpdateStatusEvent,
)

__all__ = [
    "ClientEvent",
    "error_event",
    "server_event",
    # Feed
    "FeedClientEvent",
    "SubscribeFeedEvent",
    "UnsubscribeFeedEvent",
    # Messaging
    "JoinConversationEvent",
    "LeaveConversationEvent",
    "MarkMessagesReadEvent",
    "MessagingClientEvent",
    "SendMessageEvent",
    "SendMessagePayload",
    "TypingEvent",
    "TypingPayload",
    # Notifications
    "MarkAllNotificationsReadEvent",
    "MarkNotificationReadEvent",
    "NotificationClientEvent",
    # Presence
    "CheckUsersStatusEvent",
    "GetOnlineUsersEvent",
    "PresenceClientEvent",
    "UpdateStatusEvent",
]
