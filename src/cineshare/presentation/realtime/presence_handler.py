"""
Presence channel event handler.
"""

from cineshare.domain.events import (
    CheckUsersStatusEvent,
    GetOnlineUsersEvent,
    UpdateStatusEvent,
)
from cineshare.domain.events.presence import (
    ONLINE_USERS_LIST,
    STATUS_UPDATED,
    USERS_STATUS,
)
from cineshare.presentation.realtime.context import ChannelContext


async def handle_presence_event(event, ctx: ChannelContext) -> None:
    registry = ctx.container.presence_registry

    if isinstance(event, UpdateStatusEvent):
        status = await registry.set_status(ctx.user.id, event.data)
        await ctx.reply(STATUS_UPDATED, {"userId": ctx.user.id, "status": status.value})

    elif isinstance(event, GetOnlineUsersEvent):
        await ctx.reply(ONLINE_USERS_LIST, registry.get_online_users())

    elif isinstance(event, CheckUsersStatusEvent):
        statuses = await registry.check_statuses(list(dict.fromkeys(event.data)))
        await ctx.reply(USERS_STATUS, statuses)
