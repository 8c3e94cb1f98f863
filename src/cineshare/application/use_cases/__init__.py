"""
Application use cases.
"""

from cineshare.application.use_cases.authenticate_connection import (
    AuthenticateConnection,
)
from cineshare.application.use_cases.conversation_access import (
    JoinConversation,
    MarkConversationRead,
)
from cineshare.application.use_cases.get_current_user import GetCurrentUser
from cineshare.application.use_cases.login_user import LoginUser, LoginUserCommand
from cineshare.application.use_cases.logout_user import LogoutUser
from cineshare.application.use_cases.message_validation import (
    ValidateClientEventUseCase,
)
from cineshare.application.use_cases.notifications import (
    CreateNotification,
    CreateNotificationCommand,
    ListNotifications,
    MarkAllNotificationsRead,
    MarkNotificationRead,
)
from cineshare.application.use_cases.refresh_session import RefreshSession
from cineshare.application.use_cases.register_user import (
    RegisterUser,
    RegisterUserCommand,
)
from cineshare.application.use_cases.review_reports import (
    GetReview,
    ReportReview,
    ReportReviewCommand,
)
from cineshare.application.use_cases.send_direct_message import (
    SendDirectMessage,
    SendDirectMessageCommand,
)

__all__ = [
    # Auth
    "AuthenticateConnection",
    "GetCurrentUser",
    "LoginUser",
    "LoginUserCommand",
    "LogoutUser",
    "RefreshSession",
    "RegisterUser",
    "RegisterUserCommand",
    # Messaging
    "JoinConversation",
    "MarkConversationRead",
    "SendDirectMessage",
    "SendDirectMessageCommand",
    # Notifications
    "CreateNotification",
    "CreateNotificationCommand",
    "ListNotifications",
    "MarkAllNotificationsRead",
    "MarkNotificationRead",
    # Reviews
    "GetReview",
    "ReportReview",
    "ReportReviewCommand",
    # Realtime
    "ValidateClientEventUseCase",
]
