"""
Presence channel events.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import Field

from cineshare.domain.events.base import ClientEvent, NonEmptyStr


class UpdateStatusEvent(ClientEvent):
    """Explicit status change. Offline is never user-selectable."""

    event: Literal["updateStatus"]
    data: Literal["online", "away"]


class GetOnlineUsersEvent(ClientEvent):
    event: Literal["getOnlineUsers"]
    data: Optional[Any] = None


class CheckUsersStatusEvent(ClientEvent):
    """Ask for status and last-seen time of specific users."""

    event: Literal["checkUsersStatus"]
    data: List[NonEmptyStr] = Field(..., max_length=500)


PresenceClientEvent = Annotated[
    Union[UpdateStatusEvent, GetOnlineUsersEvent, CheckUsersStatusEvent],
    Field(discriminator="event"),
]

# Server -> client
PRESENCE_CHANGE = "presenceChange"
ONLINE_USERS_LIST = "onlineUsersList"
USERS_STATUS = "usersStatus"
STATUS_UPDATED = "statusUpdated"
