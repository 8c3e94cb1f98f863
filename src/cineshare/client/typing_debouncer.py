"""
Typing indicator debouncing.
"""

import asyncio
from typing import Awaitable, Callable, Optional

TYPING_IDLE_SECONDS = 1.0


class TypingDebouncer:
    """
    Turns keystrokes into typing start/stop signals.

    Every keystroke emits True and restarts an idle countdown; when it
    elapses False is emitted. `stop()` emits False right away (message
    sent, conversation left).

    Usage:
        debouncer = TypingDebouncer(
            lambda typing: channel.send(
                "typing", {"conversationId": cid, "isTyping": typing}
            )
        )
        await debouncer.keystroke()
    """

    def __init__(
        self,
        emit: Callable[[bool], Awaitable[None]],
        idle_seconds: float = TYPING_IDLE_SECONDS,
    ):
        self.emit = emit
        self.idle_seconds = idle_seconds
        self._typing = False
        self._timer: Optional[asyncio.Task] = None

    @property
    def is_typing(self) -> bool:
        return self._typing

    async def keystroke(self) -> None:
        self._cancel_timer()
        self._typing = True
        await self.emit(True)
        self._timer = asyncio.create_task(self._idle())

    async def stop(self) -> None:
        self._cancel_timer()
        if self._typing:
            self._typing = False
            await self.emit(False)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def _idle(self) -> None:
        await asyncio.sleep(self.idle_seconds)
        self._timer = None
        if self._typing:
            self._typing = False
            await self.emit(False)
