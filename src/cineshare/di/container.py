"""
Dependency Injection container for CineShare.

Manages lifecycle and dependencies of all application components.
"""

from datetime import timedelta
from typing import Optional

from shared.reporter import SystemReporter
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.application.use_cases import (
    AuthenticateConnection,
    CreateNotification,
    GetCurrentUser,
    GetReview,
    JoinConversation,
    ListNotifications,
    LoginUser,
    LogoutUser,
    MarkAllNotificationsRead,
    MarkConversationRead,
    MarkNotificationRead,
    RefreshSession,
    RegisterUser,
    ReportReview,
    SendDirectMessage,
    ValidateClientEventUseCase,
)
from cineshare.config.settings import Settings
from cineshare.domain.clock import utc_now
from cineshare.domain.services import IPresenceMirror
from cineshare.domain.value_objects import ChannelName
from cineshare.infrastructure.auth import PasswordHasher, TokenService
from cineshare.infrastructure.cache import RedisPresenceMirror
from cineshare.infrastructure.persistence import Database
from cineshare.infrastructure.persistence.repositories import (
    ConversationRepository,
    MessageRepository,
    NotificationRepository,
    ReviewReportRepository,
    ReviewRepository,
    UserRepository,
)
from cineshare.infrastructure.realtime import (
    ConnectionManager,
    FeedChannel,
    MessagingChannel,
    NotificationChannel,
    PresenceRegistry,
)
from cineshare.infrastructure.shutdown import ShutdownManager


class Container:
    """
    Dependency Injection container.

    Process-wide components (database, token service, connection
    manager, presence registry, channels) are lazy singletons.
    Use cases touching persistence are built per request around the
    caller's session.
    """

    def __init__(self, settings: Settings, reporter: Optional[SystemReporter] = None):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            reporter: Shared reporter (built from settings if omitted)
        """
        self.settings = settings
        self.reporter = reporter or SystemReporter.from_level_name(
            "cineshare", settings.log_level, settings.log_file
        )

        self._database: Optional[Database] = None
        self._token_service: Optional[TokenService] = None
        self._password_hasher: Optional[PasswordHasher] = None
        self._connection_manager: Optional[ConnectionManager] = None
        self._presence_registry: Optional[PresenceRegistry] = None
        self._presence_mirror: Optional[IPresenceMirror] = None
        self._notification_channel: Optional[NotificationChannel] = None
        self._messaging_channel: Optional[MessagingChannel] = None
        self._feed_channel: Optional[FeedChannel] = None
        self._shutdown_manager: Optional[ShutdownManager] = None
        self._validate_event_use_case: Optional[ValidateClientEventUseCase] = None

        self.started_at = utc_now()

    # ================================================================
    # Infrastructure
    # ================================================================

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = Database(
                database_url=self.settings.database_url,
                echo=self.settings.database_echo,
            )
        return self._database

    @property
    def token_service(self) -> TokenService:
        """
        Get TokenService singleton.

        Raises:
            ValueError: If a signing key is not configured
        """
        if self._token_service is None:
            self._token_service = TokenService(
                secret=self.settings.jwt_secret,
                refresh_secret=self.settings.jwt_refresh_secret,
                algorithm=self.settings.jwt_algorithm,
                access_ttl=timedelta(minutes=self.settings.access_token_ttl_minutes),
                refresh_ttl=timedelta(days=self.settings.refresh_token_ttl_days),
            )
        return self._token_service

    @property
    def password_hasher(self) -> PasswordHasher:
        if self._password_hasher is None:
            self._password_hasher = PasswordHasher()
        return self._password_hasher

    @property
    def connection_manager(self) -> ConnectionManager:
        if self._connection_manager is None:
            self._connection_manager = ConnectionManager(
                max_connections_per_user=self.settings.max_connections_per_user,
                reporter=self.reporter,
            )
        return self._connection_manager

    @property
    def presence_mirror(self) -> Optional[IPresenceMirror]:
        """Redis presence mirror, or None when Redis is disabled."""
        if not self.settings.redis_enabled:
            return None

        if self._presence_mirror is None:
            self._presence_mirror = RedisPresenceMirror(
                redis_url=self.settings.redis_url,
                ttl_seconds=self.settings.presence_status_ttl_seconds,
            )
        return self._presence_mirror

    @property
    def presence_registry(self) -> PresenceRegistry:
        """
        Get PresenceRegistry singleton.

        Changes are broadcast to every presence-channel connection.
        """
        if self._presence_registry is None:
            self._presence_registry = PresenceRegistry(
                broadcaster=self._broadcast_presence,
                mirror=self.presence_mirror,
                reporter=self.reporter,
            )
        return self._presence_registry

    async def _broadcast_presence(self, frame: dict) -> None:
        manager = self.connection_manager
        await manager.send_many(
            manager.channel_connections(ChannelName.PRESENCE.value), frame
        )

    @property
    def notification_channel(self) -> NotificationChannel:
        if self._notification_channel is None:
            self._notification_channel = NotificationChannel(
                self.connection_manager, reporter=self.reporter
            )
        return self._notification_channel

    @property
    def messaging_channel(self) -> MessagingChannel:
        if self._messaging_channel is None:
            self._messaging_channel = MessagingChannel(
                self.connection_manager, reporter=self.reporter
            )
        return self._messaging_channel

    @property
    def feed_channel(self) -> FeedChannel:
        if self._feed_channel is None:
            self._feed_channel = FeedChannel(
                self.connection_manager, reporter=self.reporter
            )
        return self._feed_channel

    @property
    def shutdown_manager(self) -> ShutdownManager:
        if self._shutdown_manager is None:
            self._shutdown_manager = ShutdownManager(
                shutdown_timeout=self.settings.shutdown_timeout,
                grace_period=self.settings.shutdown_grace_period,
                reporter=self.reporter,
            )
        return self._shutdown_manager

    # ================================================================
    # Use cases without persistence
    # ================================================================

    def get_authenticate_connection_use_case(self) -> AuthenticateConnection:
        return AuthenticateConnection(self.token_service)

    def get_validate_event_use_case(self) -> ValidateClientEventUseCase:
        if self._validate_event_use_case is None:
            self._validate_event_use_case = ValidateClientEventUseCase(
                max_message_size=self.settings.max_message_size,
            )
        return self._validate_event_use_case

    # ================================================================
    # Use cases bound to a session
    # ================================================================

    def get_register_user_use_case(self, session: AsyncSession) -> RegisterUser:
        return RegisterUser(
            UserRepository(session), self.password_hasher, self.token_service
        )

    def get_login_user_use_case(self, session: AsyncSession) -> LoginUser:
        return LoginUser(
            UserRepository(session), self.password_hasher, self.token_service
        )

    def get_refresh_session_use_case(self, session: AsyncSession) -> RefreshSession:
        return RefreshSession(UserRepository(session), self.token_service)

    def get_logout_user_use_case(self, session: AsyncSession) -> LogoutUser:
        return LogoutUser(UserRepository(session))

    def get_current_user_use_case(self, session: AsyncSession) -> GetCurrentUser:
        return GetCurrentUser(UserRepository(session))

    def get_send_direct_message_use_case(
        self, session: AsyncSession
    ) -> SendDirectMessage:
        return SendDirectMessage(
            UserRepository(session),
            ConversationRepository(session),
            MessageRepository(session),
            max_message_length=self.settings.max_message_length,
        )

    def get_join_conversation_use_case(self, session: AsyncSession) -> JoinConversation:
        return JoinConversation(ConversationRepository(session))

    def get_mark_conversation_read_use_case(
        self, session: AsyncSession
    ) -> MarkConversationRead:
        return MarkConversationRead(
            ConversationRepository(session), MessageRepository(session)
        )

    def get_create_notification_use_case(
        self, session: AsyncSession
    ) -> CreateNotification:
        return CreateNotification(
            NotificationRepository(session), self.notification_channel
        )

    def get_mark_notification_read_use_case(
        self, session: AsyncSession
    ) -> MarkNotificationRead:
        return MarkNotificationRead(NotificationRepository(session))

    def get_mark_all_notifications_read_use_case(
        self, session: AsyncSession
    ) -> MarkAllNotificationsRead:
        return MarkAllNotificationsRead(NotificationRepository(session))

    def get_list_notifications_use_case(
        self, session: AsyncSession
    ) -> ListNotifications:
        return ListNotifications(NotificationRepository(session))

    def get_report_review_use_case(self, session: AsyncSession) -> ReportReview:
        return ReportReview(ReviewRepository(session), ReviewReportRepository(session))

    def get_review_use_case(self, session: AsyncSession) -> GetReview:
        return GetReview(ReviewRepository(session), ReviewReportRepository(session))

    def get_uptime_seconds(self) -> float:
        return (utc_now() - self.started_at).total_seconds()
