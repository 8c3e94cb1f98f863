"""
Authentication infrastructure.
"""

from cineshare.infrastructure.auth.password_hasher import PasswordHasher
from cineshare.infrastructure.auth.token_service import TokenService

__all__ = [
    "PasswordHasher",
    "TokenService",
]
