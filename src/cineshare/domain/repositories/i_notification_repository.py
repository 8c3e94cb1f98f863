"""
Notification repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from cineshare.domain.entities import Notification


class INotificationRepository(ABC):
    """Interface for notification persistence operations."""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Persist a notification."""

    @abstractmethod
    async def get_by_id(self, notification_id: str) -> Optional[Notification]:
        """Get notification by ID."""

    @abstractmethod
    async def list_for_user(
        self, user_id: str, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """Notifications of a user, newest first."""

    @abstractmethod
    async def mark_read(self, notification_id: str) -> None:
        """Mark one notification as read."""

    @abstractmethod
    async def mark_all_read(self, user_id: str) -> int:
        """
        Mark every unread notification of a user as read.

        Returns:
            Number of notifications updated
        """
