"""
User repository interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from cineshare.domain.entities import User


class IUserRepository(ABC):
    """Interface for user persistence operations."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create new user.

        Args:
            user: User entity to create

        Returns:
            Created user entity
        """

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User unique identifier

        Returns:
            User entity if found, None otherwise
        """

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""

    @abstractmethod
    async def set_refresh_token_id(
        self, user_id: str, refresh_token_id: Optional[str]
    ) -> None:
        """
        Store the ID of the refresh token currently accepted for a user.

        Args:
            user_id: User unique identifier
            refresh_token_id: Token ID, or None to revoke
        """

    @abstractmethod
    async def rotate_refresh_token_id(
        self, user_id: str, current_id: str, new_id: str
    ) -> bool:
        """
        Swap the accepted refresh token ID only if it still equals `current_id`.

        Returns:
            False if another exchange already rotated or revoked it
        """
