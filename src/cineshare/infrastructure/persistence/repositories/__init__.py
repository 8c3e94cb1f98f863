"""
Repository implementations.
"""

from cineshare.infrastructure.persistence.repositories.conversation_repository import (
    ConversationRepository,
    MessageRepository,
)
from cineshare.infrastructure.persistence.repositories.notification_repository import (
    NotificationRepository,
)
from cineshare.infrastructure.persistence.repositories.review_repository import (
    ReviewReportRepository,
    ReviewRepository,
)
from cineshare.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "ConversationRepository",
    "MessageRepository",
    "NotificationRepository",
    "ReviewReportRepository",
    "ReviewRepository",
    "UserRepository",
]
