"""
Persistence infrastructure.
"""

from cineshare.infrastructure.persistence.database import Database
from cineshare.infrastructure.persistence.models import Base

__all__ = [
    "Base",
    "Database",
]
