"""
User entity - Domain model for platform users.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

from cineshare.domain.clock import utc_now


@dataclass
class User:
    """
    User entity.

    `refresh_token_id` holds the identifier of the only refresh token
    currently accepted for this user. It is rotated on every refresh and
    cleared on logout.
    """

    email: str
    username: str
    password_hash: str = field(repr=False)
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    refresh_token_id: Optional[str] = field(default=None, repr=False)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        """Validate user data after initialization."""
        if not self.email:
            raise ValueError("Email is required")
        if not self.username:
            raise ValueError("Username is required")

    @property
    def public_name(self) -> str:
        return self.display_name or self.username

    def to_public_dict(self) -> dict:
        """User representation returned to clients."""
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "displayName": self.display_name,
            "avatar": self.avatar,
        }
