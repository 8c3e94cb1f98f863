"""
Refresh session use case.

Exchanges a refresh token for a new token pair. Refresh tokens are
single use: each exchange rotates the token ID stored on the user, so
replaying an older refresh token fails.
"""

from cineshare.application.dto import AuthResult
from cineshare.domain.exceptions import TokenInvalidError
from cineshare.domain.repositories import IUserRepository
from cineshare.infrastructure.auth import TokenService


class RefreshSession:
    """Use case for rotating a refresh token."""

    def __init__(self, user_repository: IUserRepository, token_service: TokenService):
        self.user_repository = user_repository
        self.token_service = token_service

    async def execute(self, refresh_token: str) -> AuthResult:
        """
        Refresh session.

        Args:
            refresh_token: Encoded refresh token

        Returns:
            AuthResult with the same identity and new tokens

        Raises:
            TokenInvalidError: Invalid, expired, revoked or superseded token
        """
        payload = self.token_service.decode_refresh(refresh_token)

        user = await self.user_repository.get_by_id(payload.sub)
        if not user:
            raise TokenInvalidError("Refresh token subject no longer exists")

        if user.refresh_token_id != payload.jti:
            raise TokenInvalidError("Refresh token has been revoked")

        tokens = self.token_service.issue(payload.sub, payload.email, payload.username)
        rotated = await self.user_repository.rotate_refresh_token_id(
            user.id, payload.jti, tokens.refresh_token_id
        )
        if not rotated:
            raise TokenInvalidError("Refresh token has been revoked")
        user.refresh_token_id = tokens.refresh_token_id

        return AuthResult(user=user, tokens=tokens)
