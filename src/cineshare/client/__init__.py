"""
Python client for the CineShare API and realtime channels.
"""

from cineshare.client.api_client import ApiClient
from cineshare.client.channel_client import ChannelClient
from cineshare.client.exceptions import ApiError, SessionExpiredError
from cineshare.client.refresh_coordinator import (
    SilentRefresher,
    TokenRefreshCoordinator,
)
from cineshare.client.session import Session, SessionStore, is_token_expired
from cineshare.client.typing_debouncer import TypingDebouncer

__all__ = [
    "ApiClient",
    "ApiError",
    "ChannelClient",
    "Session",
    "SessionExpiredError",
    "SessionStore",
    "SilentRefresher",
    "TokenRefreshCoordinator",
    "TypingDebouncer",
    "is_token_expired",
]
