"""
Notifications channel events.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field

from cineshare.domain.events.base import ClientEvent, NonEmptyStr


class MarkNotificationReadEvent(ClientEvent):
    """Mark a single notification as read. Payload: notification ID."""

    event: Literal["markAsRead"]
    data: NonEmptyStr


class MarkAllNotificationsReadEvent(ClientEvent):
    """Mark every notification of the connected user as read."""

    event: Literal["markAllAsRead"]
    data: Optional[Any] = None


NotificationClientEvent = Annotated[
    Union[MarkNotificationReadEvent, MarkAllNotificationsReadEvent],
    Field(discriminator="event"),
]

# Server -> client
NOTIFICATION = "notification"
NOTIFICATION_MARKED_AS_READ = "notificationMarkedAsRead"
ALL_NOTIFICATIONS_MARKED_AS_READ = "allNotificationsMarkedAsRead"
