"""
Unit tests for ConnectionManager.

Usage:
    pytest tests/unit/infrastructure/test_connection_manager.py
"""

import pytest

from cineshare.infrastructure.realtime import ConnectionLimitExceeded, ConnectionManager


class TestConnectionManager:
    """Unit tests for connection bookkeeping and sends."""

    # ============================================================
    # Registration
    # ============================================================

    def test_add_and_remove(self, fake_socket):
        """Test a connection is indexed by channel and user, then dropped."""
        manager = ConnectionManager()

        connection = manager.add(fake_socket(), "messages", "alice")

        assert manager.get(connection.id) is connection
        assert manager.get_total_connections() == 1
        assert manager.get_channel_count("messages") == 1
        assert manager.connections_for_user("messages", "alice") == [connection]

        assert manager.remove(connection.id) is connection
        assert manager.get_total_connections() == 0
        assert manager.connections_for_user("messages", "alice") == []

    def test_remove_unknown_is_noop(self):
        """Test removing an unknown ID returns None."""
        assert ConnectionManager().remove("conn_missing") is None

    def test_unknown_channel_rejected(self, fake_socket):
        """Test only the four realtime channels are accepted."""
        with pytest.raises(ValueError):
            ConnectionManager().add(fake_socket(), "admin", "alice")

    def test_per_user_limit(self, fake_socket):
        """Test the per-user, per-channel connection limit."""
        manager = ConnectionManager(max_connections_per_user=2)
        manager.add(fake_socket(), "presence", "alice")
        manager.add(fake_socket(), "presence", "alice")

        with pytest.raises(ConnectionLimitExceeded) as exc_info:
            manager.add(fake_socket(), "presence", "alice")
        assert exc_info.value.limit_type == "per_user"

        # Other channels and other users are unaffected
        manager.add(fake_socket(), "feed", "alice")
        manager.add(fake_socket(), "presence", "bob")

    def test_counts_per_channel(self, fake_socket):
        """Test get_all_channels covers every channel."""
        manager = ConnectionManager()
        manager.add(fake_socket(), "presence", "alice")
        manager.add(fake_socket(), "presence", "bob")
        manager.add(fake_socket(), "feed", "alice")

        assert manager.get_all_channels() == {
            "notifications": 0,
            "presence": 2,
            "feed": 1,
            "messages": 0,
        }
        assert manager.get_user_connection_count("alice") == 2

    def test_room_members(self, fake_socket):
        """Test room lookup is limited to members on the channel."""
        manager = ConnectionManager()
        a = manager.add(fake_socket(), "messages", "alice")
        b = manager.add(fake_socket(), "messages", "bob")
        manager.add(fake_socket(), "messages", "carol")
        a.join_room("conversation:c1")
        b.join_room("conversation:c1")

        members = manager.room_members("messages", "conversation:c1")

        assert {c.id for c in members} == {a.id, b.id}

    # ============================================================
    # Sending
    # ============================================================

    async def test_send(self, fake_socket):
        """Test a frame reaches the socket."""
        manager = ConnectionManager()
        socket = fake_socket()
        connection = manager.add(socket, "feed", "alice")

        assert await manager.send(connection.id, {"event": "x", "data": 1})
        assert socket.sent == [{"event": "x", "data": 1}]

    async def test_send_to_unknown_connection(self):
        """Test sending to an unknown ID reports False."""
        assert not await ConnectionManager().send("conn_missing", {"event": "x"})

    async def test_failed_send_drops_connection(self, fake_socket):
        """Test a dead socket is unregistered on the first failed write."""
        manager = ConnectionManager()
        connection = manager.add(fake_socket(fail=True), "feed", "alice")

        assert not await manager.send(connection.id, {"event": "x"})
        assert manager.get(connection.id) is None

    async def test_send_many_deduplicates(self, fake_socket):
        """Test the same connection never receives a frame twice."""
        manager = ConnectionManager()
        socket = fake_socket()
        connection = manager.add(socket, "feed", "alice")

        sent = await manager.send_many([connection, connection], {"event": "x"})

        assert sent == 1
        assert len(socket.sent) == 1

    async def test_send_many_skips_failures(self, fake_socket):
        """Test one dead socket does not stop delivery to the others."""
        manager = ConnectionManager()
        dead = manager.add(fake_socket(fail=True), "feed", "alice")
        live_socket = fake_socket()
        live = manager.add(live_socket, "feed", "bob")

        sent = await manager.send_many([dead, live], {"event": "x"})

        assert sent == 1
        assert live_socket.sent == [{"event": "x"}]
