"""
Feed channel events.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from cineshare.domain.events.base import ClientEvent, NonEmptyStr


class SubscribeFeedEvent(ClientEvent):
    event: Literal["subscribe"]
    data: NonEmptyStr


class UnsubscribeFeedEvent(ClientEvent):
    event: Literal["unsubscribe"]
    data: NonEmptyStr


FeedClientEvent = Annotated[
    Union[SubscribeFeedEvent, UnsubscribeFeedEvent],
    Field(discriminator="event"),
]

# Server -> client
NEW_ACTIVITY = "newActivity"
SUBSCRIBED = "subscribed"
UNSUBSCRIBED = "unsubscribed"
