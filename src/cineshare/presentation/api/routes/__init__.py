"""
API routes for CineShare.
"""

from cineshare.presentation.api.routes.auth import router as auth_router
from cineshare.presentation.api.routes.health import router as health_router
from cineshare.presentation.api.routes.notifications import (
    router as notifications_router,
)
from cineshare.presentation.api.routes.presence import router as presence_router
from cineshare.presentation.api.routes.reviews import router as reviews_router
from cineshare.presentation.api.routes.websocket import router as websocket_router

__all__ = [
    "auth_router",
    "health_router",
    "notifications_router",
    "presence_router",
    "reviews_router",
    "websocket_router",
]
