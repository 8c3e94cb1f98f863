"""
Notification API schemas.
"""

from typing import List, Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    type: str
    actorId: str
    actorName: str
    actorAvatar: Optional[str] = None
    message: str
    link: Optional[str] = None
    createdAt: str
    read: bool


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unreadCount: int


class MarkAllReadResponse(BaseModel):
    count: int
