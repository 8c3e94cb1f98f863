"""
Feed channel event handler.
"""

from cineshare.domain.events import SubscribeFeedEvent, UnsubscribeFeedEvent
from cineshare.domain.events.feed import SUBSCRIBED, UNSUBSCRIBED
from cineshare.domain.exceptions import ValidationError
from cineshare.presentation.realtime.context import ChannelContext


async def handle_feed_event(event, ctx: ChannelContext) -> None:
    """
    Subscribe or unsubscribe the socket to the caller's own feed.

    Raises:
        ValidationError: If the requested user ID is not the caller's
    """
    if event.data != ctx.user.id:
        raise ValidationError.single("userId", "You can only follow your own feed")

    feed = ctx.container.feed_channel

    if isinstance(event, SubscribeFeedEvent):
        feed.subscribe(ctx.connection, event.data)
        await ctx.reply(
            SUBSCRIBED, {"userId": event.data, "message": "Subscribed to feed"}
        )

    elif isinstance(event, UnsubscribeFeedEvent):
        feed.unsubscribe(ctx.connection, event.data)
        await ctx.reply(
            UNSUBSCRIBED, {"userId": event.data, "message": "Unsubscribed from feed"}
        )
