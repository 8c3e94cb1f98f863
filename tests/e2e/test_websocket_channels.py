"""
E2E tests for the realtime channels.

Runs the full application (lifespan included) through Starlette's
TestClient and talks to /ws/{channel} like a browser would.

Usage:
    pytest tests/e2e/test_websocket_channels.py
"""

import json
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from cineshare.application.use_cases import CreateNotificationCommand
from cineshare.domain.value_objects import ChannelName, NotificationType
from cineshare.infrastructure.shutdown import ShutdownState
from cineshare.presentation.realtime import CHANNEL_HANDLERS

PASSWORD = "Secret123"


def register(client: TestClient, username: str) -> dict:
    response = client.post(
        "/auth/register",
        json={
            "email": f"{username}@example.com",
            "username": username,
            "password": PASSWORD,
        },
    )
    assert response.status_code == 201, response.text
    data = response.json()
    return {"id": data["user"]["id"], "token": data["accessToken"]}


def connect(client: TestClient, channel: str, user: dict):
    return client.websocket_connect(f"/ws/{channel}?token={user['token']}")


def drain(ws) -> List[dict]:
    """
    Return every frame queued before a ping round trip.

    The server handles a socket's frames in order, so anything already
    sent to it arrives before the "pong".
    """
    ws.send_text("ping")
    frames = []
    while True:
        text = ws.receive_text()
        if text == "pong":
            return frames
        frames.append(json.loads(text))


def receive_until(ws, event: str, match: Callable[[dict], bool] = lambda d: True):
    """Read frames until one named `event` whose data satisfies `match`."""
    for _ in range(20):
        frame = ws.receive_json()
        if frame["event"] == event and match(frame["data"]):
            return frame["data"]
    raise AssertionError(f"{event} not received")


class TestHandshake:
    """E2E tests for connection authentication and lifecycle."""

    def test_missing_token_closes_1008(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws/presence"):
                pass

        assert exc_info.value.code == 1008

    def test_invalid_token_closes_1008(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws/notifications?token=not-a-jwt"):
                pass

        assert exc_info.value.code == 1008

    def test_bearer_header_accepted(self, client):
        ada = register(client, "ada")

        with client.websocket_connect(
            "/ws/notifications", headers={"Authorization": f"Bearer {ada['token']}"}
        ) as ws:
            assert drain(ws) == [{"event": "connected", "data": {"userId": ada["id"]}}]

    def test_unknown_channel_rejected(self, client):
        ada = register(client, "ada")

        with pytest.raises(WebSocketDisconnect) as exc_info:
            with connect(client, "watchlist", ada):
                pass

        assert exc_info.value.code == 1008

    def test_refused_while_shutting_down(self, client, cineshare_app):
        ada = register(client, "ada")
        cineshare_app.container.shutdown_manager.state = ShutdownState.SHUTTING_DOWN

        with pytest.raises(WebSocketDisconnect) as exc_info:
            with connect(client, "notifications", ada):
                pass

        assert exc_info.value.code == 1001

    def test_ping_pong(self, client):
        ada = register(client, "ada")

        with connect(client, "notifications", ada) as ws:
            ws.send_text("ping")
            assert ws.receive_text() == "pong"

    def test_invalid_event_keeps_connection_open(self, client):
        ada = register(client, "ada")

        with connect(client, "notifications", ada) as ws:
            ws.send_text(json.dumps({"event": "dance", "data": None}))
            error = receive_until(ws, "error")

            assert error["code"] == "VALIDATION_ERROR"
            assert error["errors"][0]["field"] == "event"

            ws.send_text("not json")
            assert receive_until(ws, "error")["code"] == "VALIDATION_ERROR"

            assert drain(ws) == []

    def test_connected_frame_is_first(self, client):
        ada = register(client, "ada")

        with connect(client, "presence", ada) as ws:
            assert ws.receive_json() == {
                "event": "connected",
                "data": {"userId": ada["id"]},
            }

    def test_handler_failure_keeps_connection_open(self, client, monkeypatch):
        """Test an unexpected handler error becomes an INTERNAL_ERROR frame."""
        ada = register(client, "ada")

        async def broken_handler(event, ctx):
            raise RuntimeError("feed store unavailable")

        monkeypatch.setitem(CHANNEL_HANDLERS, ChannelName.FEED, broken_handler)

        with connect(client, "feed", ada) as ws:
            ws.send_json({"event": "subscribe", "data": ada["id"]})

            error = receive_until(ws, "error")
            assert error == {
                "code": "INTERNAL_ERROR",
                "message": "Could not process the event",
            }

            ws.send_text("ping")
            assert ws.receive_text() == "pong"


class TestPresenceChannel:
    """E2E tests for /ws/presence."""

    def test_status_change_reaches_other_user(self, client):
        """Test B sees A go away after both connected to presence."""
        ada = register(client, "ada")
        bob = register(client, "bob")

        with connect(client, "presence", ada) as ws_a:
            receive_until(ws_a, "presenceChange", lambda d: d["userId"] == ada["id"])

            with connect(client, "presence", bob) as ws_b:
                receive_until(
                    ws_a,
                    "presenceChange",
                    lambda d: d["userId"] == bob["id"] and d["status"] == "online",
                )

                ws_a.send_json({"event": "updateStatus", "data": "away"})
                assert receive_until(ws_a, "statusUpdated") == {
                    "userId": ada["id"],
                    "status": "away",
                }

                change = receive_until(
                    ws_b, "presenceChange", lambda d: d["userId"] == ada["id"]
                )
                assert change["status"] == "away"

                ws_b.send_json({"event": "checkUsersStatus", "data": [ada["id"], "ghost"]})
                statuses = receive_until(ws_b, "usersStatus")
                assert [(s["userId"], s["status"]) for s in statuses] == [
                    (ada["id"], "away"),
                    ("ghost", "offline"),
                ]

            offline = receive_until(
                ws_a,
                "presenceChange",
                lambda d: d["userId"] == bob["id"] and d["status"] == "offline",
            )
            assert offline["status"] == "offline"

    def test_offline_not_selectable(self, client):
        ada = register(client, "ada")

        with connect(client, "presence", ada) as ws:
            receive_until(ws, "presenceChange")
            ws.send_json({"event": "updateStatus", "data": "offline"})

            assert receive_until(ws, "error")["code"] == "VALIDATION_ERROR"

    def test_any_channel_counts_as_online(self, client):
        """Test a notifications socket alone makes the user online."""
        ada = register(client, "ada")
        bob = register(client, "bob")

        with connect(client, "notifications", ada) as ws_notifications:
            drain(ws_notifications)
            with connect(client, "presence", bob) as ws_b:
                ws_b.send_json({"event": "getOnlineUsers"})
                online = receive_until(ws_b, "onlineUsersList")

        assert set(online) == {ada["id"], bob["id"]}


class TestMessagingChannel:
    """E2E tests for /ws/messages."""

    def _open_conversation(self, ws_sender, recipient: dict) -> str:
        ws_sender.send_json(
            {
                "event": "sendMessage",
                "data": {"recipientId": recipient["id"], "content": "Seen Alien?"},
            }
        )
        sent = receive_until(ws_sender, "messageSent")
        assert sent["sequence"] == 1
        return sent["conversationId"]

    def test_room_delivery_once_and_not_to_outsiders(self, client):
        """Test joined sockets get one newMessage each and others get none."""
        ada = register(client, "ada")
        bob = register(client, "bob")
        carol = register(client, "carol")

        with connect(client, "messages", ada) as ws_a, connect(
            client, "messages", bob
        ) as ws_b, connect(client, "messages", carol) as ws_c:
            conversation_id = self._open_conversation(ws_a, bob)
            notice = receive_until(ws_b, "newMessageNotification")
            assert notice["conversationId"] == conversation_id

            ws_a.send_json({"event": "joinConversation", "data": conversation_id})
            receive_until(ws_a, "conversationJoined")
            for _ in range(2):
                ws_b.send_json({"event": "joinConversation", "data": conversation_id})
                assert receive_until(ws_b, "conversationJoined") == {
                    "conversationId": conversation_id
                }

            ws_a.send_json(
                {
                    "event": "sendMessage",
                    "data": {"recipientId": bob["id"], "content": "Tonight?"},
                }
            )
            sender_frames = [receive_until(ws_a, "newMessage")]
            sender_frames.append(receive_until(ws_a, "messageSent"))

            assert [f["sequence"] for f in sender_frames] == [2, 2]
            bob_events = [f["event"] for f in drain(ws_b)]
            assert bob_events.count("newMessage") == 1
            assert bob_events.count("newMessageNotification") == 1
            assert [f["event"] for f in drain(ws_c)] == ["connected"]

    def test_outsider_cannot_join(self, client):
        ada = register(client, "ada")
        bob = register(client, "bob")
        carol = register(client, "carol")

        with connect(client, "messages", ada) as ws_a, connect(
            client, "messages", carol
        ) as ws_c:
            conversation_id = self._open_conversation(ws_a, bob)

            ws_c.send_json({"event": "joinConversation", "data": conversation_id})

            assert receive_until(ws_c, "error")["code"] == "NOT_FOUND"

    def test_disconnect_while_typing_clears_indicator(self, client):
        """Test peers see isTyping false when the typist's socket closes."""
        ada = register(client, "ada")
        bob = register(client, "bob")

        with connect(client, "messages", bob) as ws_b:
            with connect(client, "messages", ada) as ws_a:
                conversation_id = self._open_conversation(ws_a, bob)
                for ws in (ws_a, ws_b):
                    ws.send_json({"event": "joinConversation", "data": conversation_id})
                    receive_until(ws, "conversationJoined")

                ws_a.send_json(
                    {
                        "event": "typing",
                        "data": {"conversationId": conversation_id, "isTyping": True},
                    }
                )
                typing = receive_until(ws_b, "userTyping")
                assert typing["isTyping"] is True

            cleared = receive_until(ws_b, "userTyping")

        assert cleared == {
            "userId": ada["id"],
            "conversationId": conversation_id,
            "isTyping": False,
        }

    def test_typing_requires_join(self, client):
        ada = register(client, "ada")

        with connect(client, "messages", ada) as ws:
            ws.send_json(
                {"event": "typing", "data": {"conversationId": "c1", "isTyping": True}}
            )

            error = receive_until(ws, "error")
            assert error["errors"][0]["field"] == "conversationId"

    def test_mark_read_notifies_other_participant(self, client):
        ada = register(client, "ada")
        bob = register(client, "bob")

        with connect(client, "messages", ada) as ws_a, connect(
            client, "messages", bob
        ) as ws_b:
            conversation_id = self._open_conversation(ws_a, bob)
            for ws in (ws_a, ws_b):
                ws.send_json({"event": "joinConversation", "data": conversation_id})
                receive_until(ws, "conversationJoined")

            ws_b.send_json({"event": "markAsRead", "data": conversation_id})

            assert receive_until(ws_b, "markedAsRead")["count"] == 1
            assert receive_until(ws_a, "messagesRead") == {
                "conversationId": conversation_id,
                "userId": bob["id"],
            }

    def test_empty_message_rejected(self, client):
        ada = register(client, "ada")
        bob = register(client, "bob")

        with connect(client, "messages", ada) as ws:
            ws.send_json(
                {"event": "sendMessage", "data": {"recipientId": bob["id"], "content": " "}}
            )

            error = receive_until(ws, "error")
            assert error["errors"][0]["field"] == "content"


class TestFeedChannel:
    """E2E tests for /ws/feed."""

    def test_subscribe_own_feed(self, client):
        ada = register(client, "ada")

        with connect(client, "feed", ada) as ws:
            ws.send_json({"event": "subscribe", "data": ada["id"]})
            assert receive_until(ws, "subscribed")["userId"] == ada["id"]

            ws.send_json({"event": "unsubscribe", "data": ada["id"]})
            assert receive_until(ws, "unsubscribed")["userId"] == ada["id"]

    def test_subscribe_other_users_feed_rejected(self, client):
        ada = register(client, "ada")
        bob = register(client, "bob")

        with connect(client, "feed", ada) as ws:
            ws.send_json({"event": "subscribe", "data": bob["id"]})

            error = receive_until(ws, "error")
            assert error["errors"] == [
                {"field": "userId", "message": "You can only follow your own feed"}
            ]


class TestNotificationsChannel:
    """E2E tests for /ws/notifications."""

    def test_push_and_mark_read(self, client, cineshare_app):
        ada = register(client, "ada")
        bob = register(client, "bob")
        container = cineshare_app.container

        async def notify_bob():
            async with container.database.session() as session:
                return await container.get_create_notification_use_case(
                    session
                ).execute(
                    CreateNotificationCommand(
                        user_id=bob["id"],
                        type=NotificationType.FOLLOW,
                        actor_id=ada["id"],
                        actor_name="ada",
                        message="ada followed you",
                    )
                )

        with connect(client, "notifications", bob) as ws:
            drain(ws)
            notification = client.portal.call(notify_bob)

            pushed = receive_until(ws, "notification")
            assert pushed["id"] == notification.id
            assert pushed["read"] is False

            ws.send_json({"event": "markAsRead", "data": notification.id})
            assert receive_until(ws, "notificationMarkedAsRead") == {
                "notificationId": notification.id
            }

            ws.send_json({"event": "markAllAsRead"})
            assert receive_until(ws, "allNotificationsMarkedAsRead") == {"count": 0}
