"""
Notifications channel event handler.
"""

from cineshare.domain.events import (
    MarkAllNotificationsReadEvent,
    MarkNotificationReadEvent,
)
from cineshare.domain.events.notifications import (
    ALL_NOTIFICATIONS_MARKED_AS_READ,
    NOTIFICATION_MARKED_AS_READ,
)
from cineshare.presentation.realtime.context import ChannelContext


async def handle_notifications_event(event, ctx: ChannelContext) -> None:
    """
    Apply a notifications-channel event for the connected user.

    Raises:
        EntityNotFoundError: Unknown notification or not the caller's
    """
    container = ctx.container

    if isinstance(event, MarkNotificationReadEvent):
        async with container.database.session() as session:
            use_case = container.get_mark_notification_read_use_case(session)
            notification_id = await use_case.execute(ctx.user.id, event.data)
        await ctx.reply(
            NOTIFICATION_MARKED_AS_READ, {"notificationId": notification_id}
        )

    elif isinstance(event, MarkAllNotificationsReadEvent):
        async with container.database.session() as session:
            use_case = container.get_mark_all_notifications_read_use_case(session)
            count = await use_case.execute(ctx.user.id)
        await ctx.reply(ALL_NOTIFICATIONS_MARKED_AS_READ, {"count": count})
