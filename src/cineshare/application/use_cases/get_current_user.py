"""
Get current user use case.
"""

from cineshare.domain.entities import User
from cineshare.domain.exceptions import EntityNotFoundError
from cineshare.domain.repositories import IUserRepository


class GetCurrentUser:
    """Loads the user behind an authenticated request."""

    def __init__(self, user_repository: IUserRepository):
        self.user_repository = user_repository

    async def execute(self, user_id: str) -> User:
        """
        Raises:
            EntityNotFoundError: If the account was removed after the
                token was issued
        """
        user = await self.user_repository.get_by_id(user_id)
        if not user:
            raise EntityNotFoundError("User", user_id)
        return user
