"""
Domain entities for CineShare.
"""

from cineshare.domain.entities.activity import Activity
from cineshare.domain.entities.connection import Connection, generate_connection_id
from cineshare.domain.entities.conversation import Conversation, Message
from cineshare.domain.entities.notification import Notification
from cineshare.domain.entities.presence_entry import PresenceEntry
from cineshare.domain.entities.review import Review, ReviewReport
from cineshare.domain.entities.user import User

__all__ = [
    "Activity",
    "Connection",
    "Conversation",
    "Message",
    "Notification",
    "PresenceEntry",
    "Review",
    "ReviewReport",
    "User",
    "generate_connection_id",
]
