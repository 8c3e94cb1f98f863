"""
Notification repository implementation.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.domain.entities import Notification
from cineshare.domain.repositories import INotificationRepository
from cineshare.domain.value_objects import NotificationType
from cineshare.infrastructure.persistence.models import NotificationModel


class NotificationRepository(INotificationRepository):
    """SQLAlchemy implementation of notification repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, notification: Notification) -> Notification:
        model = NotificationModel(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value,
            actor_id=notification.actor_id,
            actor_name=notification.actor_name,
            actor_avatar=notification.actor_avatar,
            message=notification.message,
            link=notification.link,
            read=notification.read,
            created_at=notification.created_at,
        )

        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        return self._to_entity(model)

    async def get_by_id(self, notification_id: str) -> Optional[Notification]:
        stmt = select(NotificationModel).where(NotificationModel.id == notification_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def list_for_user(
        self, user_id: str, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationModel.read.is_(False))
        stmt = stmt.order_by(NotificationModel.created_at.desc()).limit(limit)

        result = await self.session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def mark_read(self, notification_id: str) -> None:
        stmt = (
            update(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .values(read=True)
        )
        await self.session.execute(stmt)

    async def mark_all_read(self, user_id: str) -> int:
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.read.is_(False),
            )
            .values(read=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0

    def _to_entity(self, model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            actor_id=model.actor_id,
            actor_name=model.actor_name,
            actor_avatar=model.actor_avatar,
            message=model.message,
            link=model.link,
            read=model.read,
            created_at=model.created_at,
        )
