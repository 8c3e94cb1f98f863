"""
Register user use case.

Creates an account and signs the new user in.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from cineshare.application.dto import AuthResult
from cineshare.domain.entities import User
from cineshare.domain.exceptions import ConflictError, FieldError, ValidationError
from cineshare.domain.repositories import IUserRepository
from cineshare.infrastructure.auth import PasswordHasher, TokenService

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
DISPLAY_NAME_MAX_LENGTH = 50


@dataclass
class RegisterUserCommand:
    """Command to register a new user."""

    email: str
    username: str
    password: str
    display_name: Optional[str] = None


def validate_registration(command: RegisterUserCommand) -> List[FieldError]:
    """Collect every rule the registration payload breaks."""
    errors = []

    username = command.username or ""
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        errors.append(
            FieldError(
                "username",
                f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} "
                f"characters",
            )
        )
    elif not USERNAME_PATTERN.match(username):
        errors.append(
            FieldError(
                "username",
                "Username can only contain letters, numbers and underscores",
            )
        )

    password = command.password or ""
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            FieldError(
                "password",
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
            )
        )
    elif not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
    ):
        errors.append(
            FieldError(
                "password",
                "Password must contain an uppercase letter, a lowercase "
                "letter and a number",
            )
        )

    if command.display_name and len(command.display_name) > DISPLAY_NAME_MAX_LENGTH:
        errors.append(
            FieldError(
                "displayName",
                f"Display name must be at most {DISPLAY_NAME_MAX_LENGTH} characters",
            )
        )

    return errors


class RegisterUser:
    """
    Use case for registering a user.

    Validates the payload, rejects duplicate email or username, stores
    the user with an Argon2 password hash and issues a token pair.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ):
        """
        Initialize use case.

        Args:
            user_repository: User repository
            password_hasher: Password hasher
            token_service: Token issuer
        """
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_service = token_service

    async def execute(self, command: RegisterUserCommand) -> AuthResult:
        """
        Register user.

        Args:
            command: Registration data

        Returns:
            AuthResult with the created user and its tokens

        Raises:
            ValidationError: If any field breaks a rule
            ConflictError: If email or username is taken
        """
        errors = validate_registration(command)
        if errors:
            raise ValidationError(errors)

        email = command.email.strip().lower()

        if await self.user_repository.get_by_email(email):
            raise ConflictError("Email already registered")
        if await self.user_repository.get_by_username(command.username):
            raise ConflictError("Username already taken")

        user = User(
            email=email,
            username=command.username,
            password_hash=self.password_hasher.hash(command.password),
            display_name=command.display_name or None,
        )
        user = await self.user_repository.create(user)

        tokens = self.token_service.issue(user.id, user.email, user.username)
        await self.user_repository.set_refresh_token_id(
            user.id, tokens.refresh_token_id
        )
        user.refresh_token_id = tokens.refresh_token_id

        return AuthResult(user=user, tokens=tokens)
