"""
Repository interfaces.
"""

from cineshare.domain.repositories.i_conversation_repository import (
    IConversationRepository,
    IMessageRepository,
)
from cineshare.domain.repositories.i_notification_repository import (
    INotificationRepository,
)
from cineshare.domain.repositories.i_review_repository import (
    IReviewReportRepository,
    IReviewRepository,
)
from cineshare.domain.repositories.i_user_repository import IUserRepository

__all__ = [
    "IConversationRepository",
    "IMessageRepository",
    "INotificationRepository",
    "IReviewReportRepository",
    "IReviewRepository",
    "IUserRepository",
]
