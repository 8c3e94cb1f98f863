"""
Notification type value object.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Kinds of notification delivered on the notifications channel."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    MENTION = "mention"
