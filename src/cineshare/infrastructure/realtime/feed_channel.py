"""
Feed channel - activity fan-out to subscribed connections.
"""

from typing import Optional

from shared.reporter import Emoji, SystemReporter

from cineshare.domain.entities import Activity, Connection
from cineshare.domain.events.base import server_event
from cineshare.domain.events.feed import NEW_ACTIVITY
from cineshare.domain.value_objects import ChannelName
from cineshare.infrastructure.realtime.connection_manager import ConnectionManager


class FeedChannel:
    """
    Pushes `newActivity` events to feed connections that subscribed.

    No social-graph filtering happens here; producers decide who should
    see an activity.
    """

    channel = ChannelName.FEED.value

    def __init__(
        self,
        connection_manager: ConnectionManager,
        reporter: Optional[SystemReporter] = None,
    ):
        self.connection_manager = connection_manager
        self.reporter = reporter

    def subscribe(self, connection: Connection, user_id: str) -> bool:
        """Register interest. Returns False if already subscribed."""
        if user_id in connection.feed_subscriptions:
            return False
        connection.feed_subscriptions.add(user_id)
        return True

    def unsubscribe(self, connection: Connection, user_id: str) -> bool:
        if user_id not in connection.feed_subscriptions:
            return False
        connection.feed_subscriptions.discard(user_id)
        return True

    def subscribers(self):
        return [
            c
            for c in self.connection_manager.channel_connections(self.channel)
            if c.feed_subscriptions
        ]

    async def broadcast_activity(self, activity: Activity) -> int:
        """Push an activity to every subscribed connection."""
        frame = server_event(NEW_ACTIVITY, activity.to_event())
        sent = await self.connection_manager.send_many(self.subscribers(), frame)

        if self.reporter:
            self.reporter.info(
                f"{Emoji.MESSAGE.ACTIVITY} Activity {activity.type} broadcast "
                f"[sockets={sent}]",
                context="FeedChannel",
                verbose_level=2,
            )
        return sent

    async def push_activity(self, user_id: str, activity: Activity) -> int:
        """Push an activity to the connections that subscribed to `user_id`."""
        targets = [c for c in self.subscribers() if user_id in c.feed_subscriptions]
        frame = server_event(NEW_ACTIVITY, activity.to_event())
        return await self.connection_manager.send_many(targets, frame)
