"""
Coordinated access-token refresh.

Every caller that needs a new access token goes through one
TokenRefreshCoordinator, so a burst of 401s produces a single refresh
request whose result they all share.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional

from cineshare.client.exceptions import SessionExpiredError
from cineshare.client.session import SessionStore, is_token_expired

logger = logging.getLogger(__name__)

# refresh_token -> {"accessToken", "refreshToken", "user"}
RefreshFunction = Callable[[str], Awaitable[dict]]
LogoutCallback = Callable[[], object]

SILENT_REFRESH_INTERVAL_SECONDS = 13 * 60


class TokenRefreshCoordinator:
    """
    Single-flight token refresh.

    While a refresh is running, further `refresh()` calls await the same
    future instead of starting a new request. On failure the session is
    cleared and the logout callback runs once.
    """

    def __init__(
        self,
        store: SessionStore,
        refresh_function: RefreshFunction,
        on_logout: Optional[LogoutCallback] = None,
    ):
        self.store = store
        self.refresh_function = refresh_function
        self.on_logout = on_logout
        self._in_flight: Optional[asyncio.Future] = None

    @property
    def is_refreshing(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    async def refresh(self) -> str:
        """
        Refresh the token pair, joining a refresh already in flight.

        Returns:
            The new access token

        Raises:
            SessionExpiredError: Refresh failed and the session was cleared
        """
        if self._in_flight is None:
            future = asyncio.ensure_future(self._refresh())
            future.add_done_callback(self._release)
            self._in_flight = future

        # One cancelled waiter must not cancel the shared refresh
        return await asyncio.shield(self._in_flight)

    async def get_access_token(self) -> str:
        """Current access token, refreshed first if it is about to expire."""
        token = self.store.session.access_token
        if token and not is_token_expired(token):
            return token
        return await self.refresh()

    def _release(self, future: asyncio.Future) -> None:
        if self._in_flight is future:
            self._in_flight = None

    async def _refresh(self) -> str:
        refresh_token = self.store.session.refresh_token
        if not refresh_token:
            await self._expire("No refresh token")
            raise SessionExpiredError()

        try:
            payload = await self.refresh_function(refresh_token)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Token refresh failed: %s", e)
            await self._expire("Session expired. Please log in.")
            raise SessionExpiredError() from e

        self.store.set_tokens(
            payload["accessToken"],
            payload["refreshToken"],
            payload.get("user"),
        )
        logger.debug("Token pair refreshed")
        return payload["accessToken"]

    async def _expire(self, reason: str) -> None:
        self.store.clear(error=reason)

        if self.on_logout is None:
            return
        result = self.on_logout()
        if inspect.isawaitable(result):
            await result


class SilentRefresher:
    """
    Background loop refreshing the session on a fixed interval.

    Stops by itself once the session can no longer be refreshed.
    """

    def __init__(
        self,
        coordinator: TokenRefreshCoordinator,
        interval: float = SILENT_REFRESH_INTERVAL_SECONDS,
    ):
        self.coordinator = coordinator
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not self.coordinator.store.session.refresh_token:
                logger.info("Silent refresh stopped: signed out")
                return
            try:
                await self.coordinator.refresh()
            except SessionExpiredError:
                logger.info("Silent refresh stopped: session expired")
                return
