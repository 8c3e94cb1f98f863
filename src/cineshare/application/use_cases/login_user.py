"""
Login user use case.
"""

from dataclasses import dataclass

from cineshare.application.dto import AuthResult
from cineshare.domain.exceptions import InvalidCredentialsError
from cineshare.domain.repositories import IUserRepository
from cineshare.infrastructure.auth import PasswordHasher, TokenService


@dataclass
class LoginUserCommand:
    """Command to sign in with email and password."""

    email: str
    password: str


class LoginUser:
    """
    Use case for email/password sign-in.

    Unknown email and wrong password fail identically.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_service = token_service

    async def execute(self, command: LoginUserCommand) -> AuthResult:
        """
        Sign in.

        Raises:
            InvalidCredentialsError: If the credentials do not match
        """
        user = await self.user_repository.get_by_email(command.email.strip())

        if not user or not self.password_hasher.verify(
            user.password_hash, command.password
        ):
            raise InvalidCredentialsError()

        tokens = self.token_service.issue(user.id, user.email, user.username)
        await self.user_repository.set_refresh_token_id(
            user.id, tokens.refresh_token_id
        )
        user.refresh_token_id = tokens.refresh_token_id

        return AuthResult(user=user, tokens=tokens)
