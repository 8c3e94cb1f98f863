"""
Unit tests for the notification, messaging and feed channels.

Usage:
    pytest tests/unit/infrastructure/test_realtime_channels.py
"""

import pytest

from cineshare.domain.entities import Activity, Message, Notification
from cineshare.domain.value_objects import NotificationType
from cineshare.infrastructure.realtime import (
    ConnectionManager,
    FeedChannel,
    MessagingChannel,
    NotificationChannel,
)


@pytest.fixture
def manager():
    return ConnectionManager()


def make_message(sequence: int = 1) -> Message:
    return Message(
        conversation_id="c1",
        sender_id="alice",
        recipient_id="bob",
        content="Have you seen Heat?",
        sequence=sequence,
    )


class TestNotificationChannel:
    """Unit tests for per-user notification delivery."""

    async def test_notify_reaches_every_socket_of_user(self, manager, fake_socket):
        """Test all of the user's notification sockets receive the event."""
        tab_one, tab_two, other = fake_socket(), fake_socket(), fake_socket()
        manager.add(tab_one, "notifications", "bob")
        manager.add(tab_two, "notifications", "bob")
        manager.add(other, "notifications", "carol")
        channel = NotificationChannel(manager)

        notification = Notification(
            user_id="bob",
            type=NotificationType.LIKE,
            actor_id="alice",
            actor_name="Alice",
            message="Alice liked your review",
        )
        sent = await channel.notify("bob", notification)

        assert sent == 2
        assert tab_one.events("notification")[0]["data"]["id"] == notification.id
        assert tab_two.events("notification")[0]["data"]["type"] == "like"
        assert other.sent == []

    async def test_notify_ignores_other_channels(self, manager, fake_socket):
        """Test sockets on other channels do not get notifications."""
        feed_socket = fake_socket()
        manager.add(feed_socket, "feed", "bob")
        channel = NotificationChannel(manager)

        sent = await channel.notify(
            "bob",
            Notification(
                user_id="bob",
                type=NotificationType.FOLLOW,
                actor_id="alice",
                actor_name="Alice",
                message="Alice followed you",
            ),
        )

        assert sent == 0
        assert feed_socket.sent == []

    async def test_notify_offline_user(self, manager):
        """Test an offline user gets nothing and nothing fails."""
        channel = NotificationChannel(manager)

        sent = await channel.notify(
            "bob",
            Notification(
                user_id="bob",
                type=NotificationType.COMMENT,
                actor_id="alice",
                actor_name="Alice",
                message="Alice commented",
            ),
        )

        assert sent == 0

    async def test_notify_many_deduplicates_users(self, manager, fake_socket):
        """Test a user listed twice is notified once."""
        bob, carol = fake_socket(), fake_socket()
        manager.add(bob, "notifications", "bob")
        manager.add(carol, "notifications", "carol")
        channel = NotificationChannel(manager)

        sent = await channel.notify_many(
            ["bob", "carol", "bob"],
            Notification(
                user_id="bob",
                type=NotificationType.MENTION,
                actor_id="alice",
                actor_name="Alice",
                message="Alice mentioned you",
            ),
        )

        assert sent == 2
        assert len(bob.events("notification")) == 1
        assert len(carol.events("notification")) == 1

    async def test_dead_socket_unregistered(self, manager, fake_socket):
        """Test a failing socket is dropped and the live one still served."""
        dead, alive = fake_socket(fail=True), fake_socket()
        manager.add(dead, "notifications", "bob")
        manager.add(alive, "notifications", "bob")
        channel = NotificationChannel(manager)

        sent = await channel.notify(
            "bob",
            Notification(
                user_id="bob",
                type=NotificationType.LIKE,
                actor_id="alice",
                actor_name="Alice",
                message="Alice liked your review",
            ),
        )

        assert sent == 1
        assert manager.get_user_connection_count("bob") == 1


class TestMessagingChannel:
    """Unit tests for conversation rooms and typing indicators."""

    # ============================================================
    # Rooms
    # ============================================================

    async def test_room_members_receive_new_message(self, manager, fake_socket):
        """Test both joined sockets get newMessage and an outsider does not."""
        sock_a, sock_b, sock_c = fake_socket(), fake_socket(), fake_socket()
        conn_a = manager.add(sock_a, "messages", "alice")
        conn_b = manager.add(sock_b, "messages", "bob")
        manager.add(sock_c, "messages", "carol")
        channel = MessagingChannel(manager)
        channel.join(conn_a, "c1")
        channel.join(conn_b, "c1")

        delivered = await channel.deliver_message(make_message(), conn_a.id)

        assert delivered == 2
        assert len(sock_a.events("newMessage")) == 1
        assert len(sock_b.events("newMessage")) == 1
        assert sock_c.events("newMessage") == []

    async def test_double_join_delivers_once(self, manager, fake_socket):
        """Test joining the same conversation twice does not duplicate delivery."""
        sock_b = fake_socket()
        conn_b = manager.add(sock_b, "messages", "bob")
        channel = MessagingChannel(manager)

        assert channel.join(conn_b, "c1") is True
        assert channel.join(conn_b, "c1") is False

        await channel.deliver_message(make_message())

        assert len(sock_b.events("newMessage")) == 1

    async def test_recipient_notified_outside_room(self, manager, fake_socket):
        """Test the recipient gets newMessageNotification without joining."""
        sock_b = fake_socket()
        manager.add(sock_b, "messages", "bob")
        channel = MessagingChannel(manager)

        delivered = await channel.deliver_message(make_message())

        assert delivered == 0
        notice = sock_b.events("newMessageNotification")[0]["data"]
        assert notice["conversationId"] == "c1"
        assert notice["message"]["content"] == "Have you seen Heat?"

    async def test_sender_socket_gets_message_sent(self, manager, fake_socket):
        """Test the sending socket receives messageSent with the sequence."""
        sock_a = fake_socket()
        conn_a = manager.add(sock_a, "messages", "alice")
        channel = MessagingChannel(manager)

        await channel.deliver_message(make_message(sequence=7), conn_a.id)

        assert sock_a.events("messageSent")[0]["data"]["sequence"] == 7

    async def test_leave_stops_delivery(self, manager, fake_socket):
        """Test a socket that left the room no longer gets newMessage."""
        sock_a = fake_socket()
        conn_a = manager.add(sock_a, "messages", "alice")
        channel = MessagingChannel(manager)
        channel.join(conn_a, "c1")

        assert channel.leave(conn_a, "c1") is True
        assert channel.leave(conn_a, "c1") is False
        await channel.deliver_message(make_message())

        assert sock_a.events("newMessage") == []

    # ============================================================
    # Typing
    # ============================================================

    async def test_typing_relayed_to_others_only(self, manager, fake_socket):
        """Test the typist's own sockets do not see their indicator."""
        sock_a, sock_a2, sock_b = fake_socket(), fake_socket(), fake_socket()
        conn_a = manager.add(sock_a, "messages", "alice")
        conn_a2 = manager.add(sock_a2, "messages", "alice")
        conn_b = manager.add(sock_b, "messages", "bob")
        channel = MessagingChannel(manager)
        for conn in (conn_a, conn_a2, conn_b):
            channel.join(conn, "c1")

        await channel.relay_typing(conn_a, "c1", True)

        assert sock_b.events("userTyping")[0]["data"] == {
            "userId": "alice",
            "conversationId": "c1",
            "isTyping": True,
        }
        assert sock_a.sent == []
        assert sock_a2.sent == []

    async def test_disconnect_while_typing_clears_indicator(self, manager, fake_socket):
        """Test a socket closing mid-typing emits isTyping=false to peers."""
        sock_a, sock_b = fake_socket(), fake_socket()
        conn_a = manager.add(sock_a, "messages", "alice")
        conn_b = manager.add(sock_b, "messages", "bob")
        channel = MessagingChannel(manager)
        channel.join(conn_a, "c1")
        channel.join(conn_b, "c1")
        await channel.relay_typing(conn_a, "c1", True)

        cleared = await channel.on_disconnect(conn_a)

        assert cleared == 1
        typing = [f["data"]["isTyping"] for f in sock_b.events("userTyping")]
        assert typing == [True, False]
        assert conn_a.rooms == set()

    async def test_disconnect_after_typing_stopped(self, manager, fake_socket):
        """Test no extra event when the client already sent isTyping=false."""
        sock_a, sock_b = fake_socket(), fake_socket()
        conn_a = manager.add(sock_a, "messages", "alice")
        conn_b = manager.add(sock_b, "messages", "bob")
        channel = MessagingChannel(manager)
        channel.join(conn_a, "c1")
        channel.join(conn_b, "c1")
        await channel.relay_typing(conn_a, "c1", True)
        await channel.relay_typing(conn_a, "c1", False)

        assert await channel.on_disconnect(conn_a) == 0
        assert len(sock_b.events("userTyping")) == 2


class TestFeedChannel:
    """Unit tests for feed subscriptions."""

    async def test_activity_reaches_subscribers_only(self, manager, fake_socket):
        """Test only subscribed feed sockets receive newActivity."""
        sub_socket, idle_socket = fake_socket(), fake_socket()
        subscriber = manager.add(sub_socket, "feed", "alice")
        manager.add(idle_socket, "feed", "bob")
        channel = FeedChannel(manager)
        channel.subscribe(subscriber, "alice")

        activity = Activity(type="review", actor_id="carol", payload={"movieId": 1})
        sent = await channel.broadcast_activity(activity)

        assert sent == 1
        assert sub_socket.events("newActivity")[0]["data"]["actorId"] == "carol"
        assert idle_socket.sent == []

    async def test_unsubscribe(self, manager, fake_socket):
        """Test unsubscribing stops delivery and is idempotent."""
        socket = fake_socket()
        connection = manager.add(socket, "feed", "alice")
        channel = FeedChannel(manager)

        assert channel.subscribe(connection, "alice") is True
        assert channel.subscribe(connection, "alice") is False
        assert channel.unsubscribe(connection, "alice") is True
        assert channel.unsubscribe(connection, "alice") is False

        await channel.broadcast_activity(Activity(type="follow", actor_id="bob"))

        assert socket.sent == []

    async def test_push_activity_targets_followers_of_user(self, manager, fake_socket):
        """Test push_activity goes to sockets subscribed to that user."""
        alice_socket, bob_socket = fake_socket(), fake_socket()
        alice = manager.add(alice_socket, "feed", "alice")
        bob = manager.add(bob_socket, "feed", "bob")
        channel = FeedChannel(manager)
        channel.subscribe(alice, "alice")
        channel.subscribe(bob, "bob")

        await channel.push_activity("bob", Activity(type="like", actor_id="carol"))

        assert alice_socket.sent == []
        assert len(bob_socket.events("newActivity")) == 1
