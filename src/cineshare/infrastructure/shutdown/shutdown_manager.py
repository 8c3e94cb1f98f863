"""
Graceful shutdown manager.

Tracks the shutdown state of the process and runs the registered
cleanup callbacks once, in registration order.
"""

import asyncio
import signal
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from shared.reporter import Emoji, SystemReporter

from cineshare.domain.clock import utc_now


class ShutdownState(Enum):
    """Shutdown state enum."""

    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    SHUTDOWN = "shutdown"


class ShutdownManager:
    """
    Coordinates graceful shutdown of the realtime service.

    Sequence:
    1. Signal or lifespan exit triggers initiate_shutdown()
    2. New WebSocket handshakes are refused (1001)
    3. Callbacks notify and close live sockets
    4. Process exits after the grace period

    Attributes:
        state: Current shutdown state
        shutdown_timeout: Max seconds a single callback may take
        grace_period: Seconds clients get to act on the shutdown notice
        shutdown_started_at: Timestamp when shutdown initiated
    """

    def __init__(
        self,
        shutdown_timeout: int = 30,
        grace_period: int = 5,
        reporter: Optional[SystemReporter] = None,
    ):
        self.shutdown_timeout = shutdown_timeout
        self.grace_period = grace_period
        self.reporter = reporter

        self.state = ShutdownState.RUNNING
        self.shutdown_started_at: Optional[datetime] = None
        self._shutdown_event = asyncio.Event()
        self._shutdown_callbacks: List[Callable] = []
        self._original_handlers = {}

    def is_shutting_down(self) -> bool:
        return self.state in (ShutdownState.SHUTTING_DOWN, ShutdownState.SHUTDOWN)

    def is_running(self) -> bool:
        return self.state == ShutdownState.RUNNING

    def register_shutdown_callback(self, callback: Callable) -> None:
        """
        Register a sync or async callable to run on shutdown.

        Callbacks are called in registration order.
        """
        self._shutdown_callbacks.append(callback)

    def setup_signal_handlers(self) -> None:
        """Install SIGTERM/SIGINT handlers, keeping the originals."""
        self._original_handlers = {
            signal.SIGTERM: signal.getsignal(signal.SIGTERM),
            signal.SIGINT: signal.getsignal(signal.SIGINT),
        }

        for sig in (signal.SIGTERM, signal.SIGINT):
            signal.signal(sig, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers = {}

    def _handle_signal(self, signum: int, frame) -> None:
        sig_name = signal.Signals(signum).name
        asyncio.get_event_loop().create_task(self.initiate_shutdown(sig_name))

    async def initiate_shutdown(self, reason: str = "manual") -> None:
        """
        Run the shutdown sequence. Calls after the first are no-ops.

        Args:
            reason: Signal name or caller description, for the log
        """
        if self.state != ShutdownState.RUNNING:
            return

        self.state = ShutdownState.SHUTTING_DOWN
        self.shutdown_started_at = utc_now()
        self._shutdown_event.set()

        if self.reporter:
            self.reporter.info(
                f"{Emoji.SYSTEM.SHUTDOWN} Shutdown initiated ({reason}), "
                f"{len(self._shutdown_callbacks)} callback(s)",
                context="ShutdownManager",
            )

        for callback in self._shutdown_callbacks:
            name = getattr(callback, "__name__", repr(callback))
            try:
                if asyncio.iscoroutinefunction(callback):
                    await asyncio.wait_for(callback(), timeout=self.shutdown_timeout)
                else:
                    callback()
            except asyncio.TimeoutError:
                if self.reporter:
                    self.reporter.warning(
                        f"Shutdown callback {name} timed out after "
                        f"{self.shutdown_timeout}s",
                        context="ShutdownManager",
                    )
            except Exception as e:
                if self.reporter:
                    self.reporter.error(
                        f"{Emoji.ERROR.ERROR} Shutdown callback {name} failed: {e}",
                        context="ShutdownManager",
                    )

    async def wait_for_shutdown(self) -> None:
        """Block until shutdown has been initiated."""
        await self._shutdown_event.wait()

    def mark_shutdown_complete(self) -> None:
        self.state = ShutdownState.SHUTDOWN

        if self.reporter:
            self.reporter.info(
                f"{Emoji.SYSTEM.CLEANUP} Shutdown complete",
                context="ShutdownManager",
            )

    def get_shutdown_info(self) -> dict:
        return {
            "state": self.state.value,
            "is_shutting_down": self.is_shutting_down(),
            "shutdown_started_at": (
                self.shutdown_started_at.isoformat()
                if self.shutdown_started_at
                else None
            ),
            "shutdown_timeout": self.shutdown_timeout,
            "grace_period": self.grace_period,
        }
