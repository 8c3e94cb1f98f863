"""
Value objects for CineShare domain.
"""

from cineshare.domain.value_objects.channel_name import ChannelName
from cineshare.domain.value_objects.notification_type import NotificationType
from cineshare.domain.value_objects.presence_status import PresenceStatus
from cineshare.domain.value_objects.report_reason import ReportReason
from cineshare.domain.value_objects.room import ConversationRoom

__all__ = [
    "ChannelName",
    "ConversationRoom",
    "NotificationType",
    "PresenceStatus",
    "ReportReason",
]
