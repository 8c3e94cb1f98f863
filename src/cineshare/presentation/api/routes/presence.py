"""
Presence API routes.
"""

from fastapi import APIRouter, Depends

from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.presentation.api.dependencies import get_container, require_user

router = APIRouter(prefix="/presence", tags=["Presence"])


@router.get("/online")
async def online_users(
    current_user: AuthenticatedUser = Depends(require_user),
    container: Container = Depends(get_container),
) -> dict:
    """Snapshot of connected users and counts per status."""
    registry = container.presence_registry
    return {
        "userIds": registry.get_online_users(),
        "counts": registry.counts(),
    }
