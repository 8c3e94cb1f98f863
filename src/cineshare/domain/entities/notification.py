"""
Notification entity.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from cineshare.domain.clock import utc_now
from cineshare.domain.value_objects import NotificationType


@dataclass
class Notification:
    """
    Notification addressed to one user.

    Created by producers (reviews, follows, comments) and delivered on
    the notifications channel. Only `read` changes after creation.
    """

    user_id: str
    type: NotificationType
    actor_id: str
    actor_name: str
    message: str
    actor_avatar: Optional[str] = None
    link: Optional[str] = None
    read: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def mark_read(self) -> None:
        self.read = True

    def to_event(self) -> dict:
        """Payload of the `notification` event."""
        return {
            "id": self.id,
            "type": self.type.value,
            "actorId": self.actor_id,
            "actorName": self.actor_name,
            "actorAvatar": self.actor_avatar,
            "message": self.message,
            "link": self.link,
            "createdAt": self.created_at.isoformat(),
            "read": self.read,
        }
