"""
Notification use cases.

Producers call CreateNotification; the notifications channel and the
REST routes call the read-state use cases.
"""

from dataclasses import dataclass
from typing import List, Optional

from cineshare.domain.entities import Notification
from cineshare.domain.exceptions import EntityNotFoundError
from cineshare.domain.repositories import INotificationRepository
from cineshare.domain.value_objects import NotificationType
from cineshare.infrastructure.realtime import NotificationChannel


@dataclass
class CreateNotificationCommand:
    """Command to notify `user_id` about something `actor_id` did."""

    user_id: str
    type: NotificationType
    actor_id: str
    actor_name: str
    message: str
    actor_avatar: Optional[str] = None
    link: Optional[str] = None


class CreateNotification:
    """
    Persists a notification and pushes it to the target's live sockets.

    Users are never notified about their own actions.
    """

    def __init__(
        self,
        notification_repository: INotificationRepository,
        notification_channel: NotificationChannel,
    ):
        self.notification_repository = notification_repository
        self.notification_channel = notification_channel

    async def execute(self, command: CreateNotificationCommand) -> Optional[Notification]:
        """
        Returns:
            Stored notification, or None for a self-notification
        """
        if command.user_id == command.actor_id:
            return None

        notification = await self.notification_repository.create(
            Notification(
                user_id=command.user_id,
                type=NotificationType(command.type),
                actor_id=command.actor_id,
                actor_name=command.actor_name,
                actor_avatar=command.actor_avatar,
                message=command.message,
                link=command.link,
            )
        )

        await self.notification_channel.notify(command.user_id, notification)
        return notification


class MarkNotificationRead:
    """Marks one of the caller's notifications as read."""

    def __init__(self, notification_repository: INotificationRepository):
        self.notification_repository = notification_repository

    async def execute(self, user_id: str, notification_id: str) -> str:
        """
        Returns:
            The notification ID

        Raises:
            EntityNotFoundError: Unknown ID or someone else's notification
        """
        notification = await self.notification_repository.get_by_id(notification_id)
        if not notification or notification.user_id != user_id:
            raise EntityNotFoundError("Notification", notification_id)

        if not notification.read:
            await self.notification_repository.mark_read(notification_id)
        return notification_id


class MarkAllNotificationsRead:
    def __init__(self, notification_repository: INotificationRepository):
        self.notification_repository = notification_repository

    async def execute(self, user_id: str) -> int:
        return await self.notification_repository.mark_all_read(user_id)


class ListNotifications:
    def __init__(self, notification_repository: INotificationRepository):
        self.notification_repository = notification_repository

    async def execute(
        self, user_id: str, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        return await self.notification_repository.list_for_user(
            user_id, unread_only=unread_only, limit=limit
        )
