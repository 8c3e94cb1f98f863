"""
WebSocket endpoints for the realtime channels.

/ws/notifications, /ws/presence, /ws/feed and /ws/messages share one
receive loop; the channel picks the event union and the handler.
"""

import asyncio
import time

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from shared.reporter import Emoji
from starlette.websockets import WebSocketState

from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.domain.events.base import error_event, server_event
from cineshare.domain.exceptions import CineShareException, ValidationError
from cineshare.domain.value_objects import ChannelName
from cineshare.infrastructure.realtime import ConnectionLimitExceeded
from cineshare.presentation.api.dependencies import (
    authenticate_connection,
    get_container,
)
from cineshare.presentation.realtime import CHANNEL_HANDLERS, ChannelContext

router = APIRouter(tags=["websocket"])


def exception_to_frame(exc: CineShareException) -> dict:
    """Render a domain exception as an `error` frame."""
    errors = exc.to_list() if isinstance(exc, ValidationError) else None
    return error_event(exc.code, exc.message, errors)


@router.websocket("/ws/{channel}")
async def websocket_endpoint(
    websocket: WebSocket,
    channel: ChannelName,
    user: AuthenticatedUser = Depends(authenticate_connection),
    container: Container = Depends(get_container),
):
    """
    Realtime channel endpoint.

    The handshake is authenticated by `authenticate_connection` (1008 on
    failure). New connections are refused with 1001 during shutdown.

    Connection examples:
        - ws://localhost:3001/ws/notifications?token=eyJ...
        - ws://localhost:3001/ws/messages  (Authorization: Bearer eyJ...)
    """
    reporter = container.reporter
    shutdown_manager = container.shutdown_manager

    if shutdown_manager.is_shutting_down():
        reporter.warning(
            f"{Emoji.NETWORK.REJECTED} Connection rejected: server shutting down "
            f"[channel={channel.value}] [user={user.id}]",
            context="WebSocket",
        )
        await websocket.close(
            code=status.WS_1001_GOING_AWAY,
            reason="Server is shutting down",
        )
        return

    await websocket.accept()

    manager = container.connection_manager
    try:
        connection = manager.add(websocket, channel.value, user.id)
    except ConnectionLimitExceeded as e:
        await websocket.send_json(error_event("CONNECTION_LIMIT_EXCEEDED", str(e)))
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Connection limit exceeded",
        )
        return

    await manager.send(connection.id, server_event("connected", {"userId": user.id}))

    presence = container.presence_registry
    await presence.connect(user.id, connection.id)

    reporter.info(
        f"Client connected [conn={connection.id}] [channel={channel.value}] "
        f"[user={user.id}] [total_connections={manager.get_total_connections()}]",
        context="WebSocket",
    )

    validator = container.get_validate_event_use_case()
    handler = CHANNEL_HANDLERS[channel]
    ctx = ChannelContext(connection=connection, user=user, container=container)
    receive_timeout = container.settings.receive_timeout

    connection_start_time = time.time()
    messages_processed = 0
    errors_sent = 0

    try:
        while not shutdown_manager.is_shutting_down():
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(), timeout=receive_timeout
                )
            except asyncio.TimeoutError:
                await websocket.send_json(server_event("ping"))
                continue

            messages_processed += 1

            if data == "ping":
                await websocket.send_text("pong")
                continue

            try:
                event = validator.execute(channel.value, data)
                await handler(event, ctx)
            except CineShareException as e:
                errors_sent += 1
                reporter.debug(
                    f"Event rejected [conn={connection.id}]: {e.code} {e.message}",
                    context="WebSocket",
                )
                await manager.send(connection.id, exception_to_frame(e))
            except WebSocketDisconnect:
                raise
            except Exception as e:
                errors_sent += 1
                reporter.error(
                    f"{Emoji.ERROR.ERROR} Event handler failed [conn={connection.id}]: "
                    f"{type(e).__name__}: {str(e)}",
                    context="WebSocket",
                )
                await manager.send(
                    connection.id,
                    error_event("INTERNAL_ERROR", "Could not process the event"),
                )

        if websocket.application_state == WebSocketState.CONNECTED:
            await websocket.close(
                code=status.WS_1001_GOING_AWAY,
                reason="Server shutdown",
            )

    except WebSocketDisconnect:
        reporter.info(
            f"Client disconnected [conn={connection.id}] [channel={channel.value}]",
            context="WebSocket",
        )

    except Exception as e:
        reporter.error(
            f"{Emoji.ERROR.ERROR} WebSocket connection error [conn={connection.id}]: "
            f"{type(e).__name__}: {str(e)}",
            context="WebSocket",
        )

    finally:
        if channel == ChannelName.MESSAGES:
            await container.messaging_channel.on_disconnect(connection)

        manager.remove(connection.id)
        await presence.disconnect(user.id, connection.id)

        reporter.info(
            f"Connection closed [conn={connection.id}] "
            f"[duration={time.time() - connection_start_time:.2f}s] "
            f"[messages={messages_processed}] [errors={errors_sent}]",
            context="WebSocket",
        )
