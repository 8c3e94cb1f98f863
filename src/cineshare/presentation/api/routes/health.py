"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends

from cineshare import __version__
from cineshare.di import Container
from cineshare.presentation.api.dependencies import get_container
from cineshare.presentation.schemas.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(container: Container = Depends(get_container)) -> HealthResponse:
    """
    Liveness check.

    Returns "degraded" when the database is unreachable or the service
    is shutting down.
    """
    manager = container.connection_manager
    shutdown_manager = container.shutdown_manager
    database_ok = await container.database.health_check()

    healthy = database_ok and not shutdown_manager.is_shutting_down()

    return HealthResponse(
        status="ok" if healthy else "degraded",
        service=container.settings.APP_NAME,
        version=__version__,
        uptime_seconds=container.get_uptime_seconds(),
        database=database_ok,
        total_connections=manager.get_total_connections(),
        channels=manager.get_all_channels(),
        presence=container.presence_registry.counts(),
        shutdown=shutdown_manager.get_shutdown_info(),
    )
