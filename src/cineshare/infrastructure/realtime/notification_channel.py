"""
Notification channel - per-user realtime notification delivery.
"""

from typing import Iterable, Optional

from shared.reporter import Emoji, SystemReporter

from cineshare.domain.entities import Notification
from cineshare.domain.events.base import server_event
from cineshare.domain.events.notifications import NOTIFICATION
from cineshare.domain.value_objects import ChannelName
from cineshare.infrastructure.realtime.connection_manager import ConnectionManager


class NotificationChannel:
    """
    Delivers notifications to every live notifications-channel socket of a
    user. Users without a live socket simply miss the realtime copy; the
    persisted notification is what they read later.
    """

    channel = ChannelName.NOTIFICATIONS.value

    def __init__(
        self,
        connection_manager: ConnectionManager,
        reporter: Optional[SystemReporter] = None,
    ):
        self.connection_manager = connection_manager
        self.reporter = reporter

    async def notify(self, user_id: str, notification: Notification) -> int:
        """
        Push a notification to one user.

        Returns:
            Number of sockets the notification was written to
        """
        connections = self.connection_manager.connections_for_user(
            self.channel, user_id
        )
        if not connections:
            if self.reporter:
                self.reporter.debug(
                    f"User {user_id} offline, notification {notification.id} "
                    f"kept for later",
                    context="NotificationChannel",
                )
            return 0

        frame = server_event(NOTIFICATION, notification.to_event())
        sent = await self.connection_manager.send_many(connections, frame)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.MESSAGE.NOTIFICATION} Notification {notification.type.value} "
                f"-> user={user_id} [sockets={sent}]",
                context="NotificationChannel",
                verbose_level=2,
            )
        return sent

    async def notify_many(
        self, user_ids: Iterable[str], notification: Notification
    ) -> int:
        """Push the same notification payload to several users."""
        total = 0
        for user_id in dict.fromkeys(user_ids):
            total += await self.notify(user_id, notification)
        return total
