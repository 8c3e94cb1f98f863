"""
Logout user use case.
"""

from cineshare.domain.repositories import IUserRepository


class LogoutUser:
    """Revokes the refresh token currently accepted for a user."""

    def __init__(self, user_repository: IUserRepository):
        self.user_repository = user_repository

    async def execute(self, user_id: str) -> None:
        await self.user_repository.set_refresh_token_id(user_id, None)
