"""
Emoji registry for log lifecycle markers.

Usage:
    >>> from shared.reporter import Emoji
    >>> print(f"{Emoji.SYSTEM.STARTUP} Server started")
    🚀 Server started
"""


class SystemEmoji:
    """System-level operations and lifecycle events."""

    # ============================================================
    # Lifecycle Operations
    # ============================================================
    STARTUP = "🚀"
    SHUTDOWN = "🛑"
    READY = "✅"

    # ============================================================
    # Health & Maintenance
    # ============================================================
    HEARTBEAT = "❤️"
    CLEANUP = "🧹"


class NetworkEmoji:
    """Connections and transport events."""

    CONNECTED = "🔌"
    DISCONNECT = "🔻"
    REJECTED = "🚫"
    BROADCAST = "📡"


class MessageEmoji:
    """Notifications, direct messages and feed activity."""

    NOTIFICATION = "🔔"
    DIRECT = "💬"
    TYPING = "✍️"
    ACTIVITY = "📰"
    PRESENCE = "🟢"


class AuthEmoji:
    """Token and credential operations."""

    ISSUED = "🔑"
    REFRESHED = "🔁"
    REVOKED = "🔒"
    DENIED = "⛔"


class ErrorEmoji:
    """Error levels and warning indicators."""

    CRITICAL = "🔴"
    ERROR = "❌"
    WARNING = "⚠️"


class Emoji:
    """
    Central emoji registry with semantic categories.

    Categories:
        SYSTEM: System operations and lifecycle
        NETWORK: Connections and transport
        MESSAGE: Realtime delivery
        AUTH: Token handling
        ERROR: Error levels
    """

    SYSTEM = SystemEmoji
    NETWORK = NetworkEmoji
    MESSAGE = MessageEmoji
    AUTH = AuthEmoji
    ERROR = ErrorEmoji

    SUCCESS = "✅"
    FAILURE = "❌"
