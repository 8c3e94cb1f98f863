"""
CineShare - Realtime Service

Orchestrates Clean Architecture components to provide the auth API and
the token-guarded notifications, presence, feed and messaging channels.
"""

import asyncio
import sys
import threading
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from shared.reporter import Emoji, SystemReporter

from cineshare import __version__
from cineshare.config.settings import Settings, get_settings
from cineshare.di import Container
from cineshare.domain.events.base import server_event
from cineshare.domain.exceptions import CineShareException
from cineshare.presentation.api.dependencies import set_container
from cineshare.presentation.api.middleware import (
    cineshare_exception_handler,
    request_validation_exception_handler,
)
from cineshare.presentation.api.routes import (
    auth_router,
    health_router,
    notifications_router,
    presence_router,
    reviews_router,
    websocket_router,
)


class CineShareApp:
    """
    CineShare application orchestrator.

    Thin coordination layer that initializes and connects
    all Clean Architecture components.

    Responsibilities:
        - Initialize DI container
        - Setup FastAPI application
        - Register API routes and exception handlers
        - Manage application lifecycle with graceful shutdown
        - Run uvicorn server
    """

    def __init__(self, settings: Settings):
        """
        Initialize CineShare application.

        Args:
            settings: Application settings
        """
        self.settings = settings

        self.reporter = SystemReporter.from_level_name(
            "cineshare", settings.log_level, settings.log_file
        )
        self.container = Container(settings, reporter=self.reporter)

        self.app = self._create_app()

        # Global container for FastAPI dependencies
        set_container(self.container)

        self.server: Optional[uvicorn.Server] = None
        self.heartbeat_task: Optional[asyncio.Task] = None

        self.reporter.info(
            "CineShare initialized",
            context="CineShare",
            verbose_level=2,
        )

    def _create_app(self) -> FastAPI:
        @asynccontextmanager
        async def lifespan(app: FastAPI):
            await self._on_startup()
            yield
            await self._on_shutdown()

        app = FastAPI(
            title="CineShare Realtime",
            description="Auth API and realtime channels for CineShare",
            version=__version__,
            lifespan=lifespan,
        )

        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        app.add_exception_handler(CineShareException, cineshare_exception_handler)
        app.add_exception_handler(
            RequestValidationError, request_validation_exception_handler
        )

        app.include_router(auth_router)
        app.include_router(notifications_router)
        app.include_router(reviews_router)
        app.include_router(presence_router)
        app.include_router(health_router)
        app.include_router(websocket_router)

        return app

    async def _on_startup(self):
        """
        Connect storage, register the shutdown sequence and start the
        heartbeat.
        """
        self.reporter.info(
            f"{Emoji.SYSTEM.STARTUP} CineShare starting (ENV={self.settings.ENV})",
            context="CineShare",
        )

        database = self.container.database
        await database.connect()
        await database.create_tables()

        shutdown_manager = self.container.shutdown_manager
        # signal.signal only works from the main thread
        if threading.current_thread() is threading.main_thread():
            shutdown_manager.setup_signal_handlers()
        shutdown_manager.register_shutdown_callback(self._graceful_shutdown_callback)

        self.reporter.info(
            f"Graceful shutdown enabled (timeout: {self.settings.shutdown_timeout}s, "
            f"grace: {self.settings.shutdown_grace_period}s)",
            context="CineShare",
        )

        if self.container.presence_mirror is not None:
            self.reporter.info(
                f"Presence mirror: Redis ({self.settings.redis_url})",
                context="CineShare",
            )

        self.heartbeat_task = asyncio.create_task(self._heartbeat_loop())

        self.reporter.info(
            f"{Emoji.SYSTEM.READY} Listening on {self.settings.host}:{self.settings.port}",
            context="CineShare",
        )

    async def _graceful_shutdown_callback(self):
        """Notify clients, close their sockets, then stop uvicorn."""
        await self._notify_clients_shutdown()
        await self._close_all_connections_gracefully()

        if self.server:
            self.server.should_exit = True

    async def _on_shutdown(self):
        self.reporter.info(
            "CineShare shutting down...",
            context="CineShare",
        )

        shutdown_manager = self.container.shutdown_manager
        await shutdown_manager.initiate_shutdown("lifespan")

        if self.heartbeat_task:
            self.heartbeat_task.cancel()
            try:
                await self.heartbeat_task
            except asyncio.CancelledError:
                pass
            self.heartbeat_task = None

        mirror = self.container.presence_mirror
        if mirror is not None:
            await mirror.close()

        await self.container.database.disconnect()
        shutdown_manager.restore_signal_handlers()
        shutdown_manager.mark_shutdown_complete()

    async def _notify_clients_shutdown(self):
        manager = self.container.connection_manager
        connections = list(manager.connections.values())
        if not connections:
            return

        self.reporter.info(
            f"Notifying {len(connections)} clients of shutdown",
            context="CineShare",
        )

        frame = server_event(
            "shutdown",
            {"message": "Server is shutting down", "code": status.WS_1001_GOING_AWAY},
        )
        await manager.send_many(connections, frame)

    async def _close_all_connections_gracefully(self):
        """Wait the grace period, then close whatever is still open."""
        manager = self.container.connection_manager
        grace_period = self.settings.shutdown_grace_period

        if manager.get_total_connections() and grace_period:
            self.reporter.info(
                f"Waiting {grace_period}s for graceful close",
                context="CineShare",
            )
            await asyncio.sleep(grace_period)

        total_closed = 0
        for connection_id in list(manager.sockets):
            websocket = manager.get_socket(connection_id)
            if websocket is None:
                continue
            try:
                await websocket.close(
                    code=status.WS_1001_GOING_AWAY, reason="Server shutdown"
                )
                total_closed += 1
            except RuntimeError:
                # Already closed by the client
                pass

        if total_closed > 0:
            self.reporter.info(
                f"Closed {total_closed} connections",
                context="CineShare",
            )

    async def _heartbeat_loop(self):
        """
        Ping every socket at the configured interval.

        Sockets whose write fails are dropped by the connection manager.
        Stops when shutdown is initiated.
        """
        interval = self.settings.heartbeat_interval
        shutdown_manager = self.container.shutdown_manager

        self.reporter.info(
            f"{Emoji.SYSTEM.HEARTBEAT} Heartbeat started (interval: {interval}s)",
            context="CineShare",
            verbose_level=2,
        )

        while not shutdown_manager.is_shutting_down():
            await asyncio.sleep(interval)

            manager = self.container.connection_manager
            connections = list(manager.connections.values())
            if not connections:
                continue

            alive = await manager.send_many(connections, server_event("ping"))

            self.reporter.debug(
                f"Heartbeat -> {alive}/{len(connections)} clients",
                context="CineShare",
            )

    async def serve(self):
        """
        Run server with proper signal handling.

        Uses uvicorn.Server API for proper shutdown control.
        """
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level,
        )
        self.server = uvicorn.Server(config)
        await self.server.serve()

    def start(self):
        """Run the server until it is stopped."""
        asyncio.run(self.serve())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Optional Settings instance (for testing)

    Returns:
        Configured FastAPI application
    """
    return CineShareApp(settings or get_settings()).app


def main():
    """
    Main entry point for CineShare.

    Loads configuration and starts the server. An optional first
    argument overrides the port.
    """
    settings = get_settings()

    if len(sys.argv) > 1:
        try:
            settings.port = int(sys.argv[1])
        except ValueError:
            print(f"Invalid port: {sys.argv[1]}")
            sys.exit(1)

    app = CineShareApp(settings)

    try:
        app.start()
    except KeyboardInterrupt:
        print("\nCineShare stopped by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
