"""
Graceful shutdown infrastructure.
"""

from cineshare.infrastructure.shutdown.shutdown_manager import (
    ShutdownManager,
    ShutdownState,
)

__all__ = ["ShutdownManager", "ShutdownState"]
