"""
Health check schemas.
"""

from typing import Dict

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness and realtime load snapshot."""

    status: str = Field(..., description="ok or degraded")
    service: str
    version: str
    uptime_seconds: float
    database: bool
    total_connections: int
    channels: Dict[str, int]
    presence: Dict[str, int]
    shutdown: Dict
