"""
Notification API routes.

REST mirror of the notifications channel for clients that are not
connected (initial page load, polling fallback).
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.presentation.api.dependencies import (
    get_container,
    get_db_session,
    require_user,
)
from cineshare.presentation.schemas.notification_schemas import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: int = Query(50, ge=1, le=100),
    current_user: AuthenticatedUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> NotificationListResponse:
    """Newest notifications of the caller."""
    use_case = container.get_list_notifications_use_case(session)
    notifications = await use_case.execute(
        current_user.id, unread_only=unread_only, limit=limit
    )

    return NotificationListResponse(
        notifications=[NotificationResponse(**n.to_event()) for n in notifications],
        unreadCount=sum(1 for n in notifications if not n.read),
    )


# Registered before "/{notification_id}/read" so "read-all" is not taken as an ID
@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    current_user: AuthenticatedUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> MarkAllReadResponse:
    use_case = container.get_mark_all_notifications_read_use_case(session)
    count = await use_case.execute(current_user.id)
    return MarkAllReadResponse(count=count)


@router.patch("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    current_user: AuthenticatedUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
    container: Container = Depends(get_container),
) -> dict:
    use_case = container.get_mark_notification_read_use_case(session)
    await use_case.execute(current_user.id, notification_id)
    return {"notificationId": notification_id}
