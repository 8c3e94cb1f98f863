"""
WebSocket client for one CineShare realtime channel.
"""

import asyncio
import inspect
import json
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union
from urllib.parse import urlencode

import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidStatus

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Any]
TokenProvider = Union[str, Callable[[], Awaitable[str]]]

# Close codes after which reconnecting cannot help
POLICY_VIOLATION = 1008
NO_RECONNECT_CODES = {1000, POLICY_VIOLATION}
# The server refuses a bad token before accepting, as an HTTP response
AUTH_REJECTED_STATUSES = {401, 403}


class ChannelClient:
    """
    Connects to /ws/{channel}, dispatches {event, data} frames to the
    registered handlers and reconnects on unexpected drops.

    Reconnection is bounded: after `max_reconnect_attempts` consecutive
    failures the client gives up and emits the local `reconnectFailed`
    event. A successful connection resets the counter. A rejected token
    ends the run at once with the local `authFailed` event; the server
    greets an accepted connection with `connected`. Losing an open
    connection emits the local `disconnected` event.

    Usage:
        client = ChannelClient("ws://localhost:3001", "notifications", api.ensure_access_token)
        client.on("notification", handle_notification)
        await client.run()
    """

    def __init__(
        self,
        base_url: str,
        channel: str,
        token: TokenProvider,
        max_reconnect_attempts: int = 5,
        reconnect_delay: float = 1.0,
    ):
        """
        Args:
            base_url: ws:// or wss:// root of the service
            channel: notifications, presence, feed or messages
            token: Access token, or coroutine function returning a fresh one
            max_reconnect_attempts: Consecutive failures before giving up
            reconnect_delay: Fixed delay between attempts, in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.channel = channel
        self.token = token
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_delay = reconnect_delay

        self.handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self.reconnect_attempts = 0
        self._websocket = None
        self._closing = False
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def on(self, event: str, handler: EventHandler) -> None:
        self.handlers[event].append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        if handler in self.handlers.get(event, []):
            self.handlers[event].remove(handler)

    async def _resolve_token(self) -> str:
        if callable(self.token):
            return await self.token()
        return self.token

    async def _url(self) -> str:
        token = await self._resolve_token()
        return f"{self.base_url}/ws/{self.channel}?{urlencode({'token': token})}"

    async def send(self, event: str, data: Any = None) -> None:
        """
        Send one client event.

        Raises:
            RuntimeError: Not connected
        """
        if self._websocket is None:
            raise RuntimeError(f"Channel {self.channel} is not connected")
        await self._websocket.send(json.dumps({"event": event, "data": data}))

    async def run(self) -> None:
        """Connect and process frames until closed or reconnects run out."""
        self._closing = False

        while not self._closing:
            try:
                async with websockets.connect(await self._url()) as websocket:
                    self._websocket = websocket
                    self._connected = True
                    self.reconnect_attempts = 0
                    logger.info("Connected to channel %s", self.channel)

                    async for raw in websocket:
                        await self._handle_frame(raw)

                    # Iteration ends quietly on 1000 and 1001
                    code = websocket.close_code
                    logger.info("Channel %s closed (code=%s)", self.channel, code)
                    if self._closing or code in NO_RECONNECT_CODES:
                        return

            except ConnectionClosed as e:
                code = e.rcvd.code if e.rcvd is not None else None
                logger.warning("Channel %s closed (code=%s)", self.channel, code)
                if self._closing or code in NO_RECONNECT_CODES:
                    return
            except InvalidStatus as e:
                status_code = e.response.status_code
                if status_code in AUTH_REJECTED_STATUSES:
                    logger.error(
                        "Channel %s rejected the token (HTTP %d)",
                        self.channel,
                        status_code,
                    )
                    await self._dispatch("authFailed", {"status": status_code})
                    return
                logger.warning("Channel %s connect failed: %s", self.channel, e)
            except (InvalidHandshake, OSError) as e:
                logger.warning("Channel %s connect failed: %s", self.channel, e)
            finally:
                was_connected = self.is_connected
                self._websocket = None
                self._connected = False
                if was_connected:
                    await self._dispatch("disconnected", None)

            if self._closing:
                return

            self.reconnect_attempts += 1
            if self.reconnect_attempts > self.max_reconnect_attempts:
                logger.error(
                    "Channel %s: giving up after %d reconnect attempts",
                    self.channel,
                    self.max_reconnect_attempts,
                )
                await self._dispatch("reconnectFailed", None)
                return

            logger.info(
                "Reconnecting to %s (%d/%d) in %.1fs",
                self.channel,
                self.reconnect_attempts,
                self.max_reconnect_attempts,
                self.reconnect_delay,
            )
            await asyncio.sleep(self.reconnect_delay)

    async def close(self) -> None:
        self._closing = True
        if self._websocket is not None:
            await self._websocket.close()

    async def _handle_frame(self, raw: Union[str, bytes]) -> None:
        try:
            frame = json.loads(raw)
        except ValueError:
            # Plain-text heartbeat replies ("pong")
            return

        if not isinstance(frame, dict) or "event" not in frame:
            logger.debug("Ignoring frame without event: %r", frame)
            return

        await self._dispatch(frame["event"], frame.get("data"))

    async def _dispatch(self, event: str, data: Any) -> None:
        for handler in list(self.handlers.get(event, [])):
            try:
                result = handler(data)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Handler for %s/%s failed", self.channel, event)
