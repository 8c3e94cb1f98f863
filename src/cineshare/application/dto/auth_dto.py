"""
Authentication result DTOs.
"""

from dataclasses import dataclass

from cineshare.domain.auth import TokenPair
from cineshare.domain.entities import User


@dataclass
class AuthResult:
    """User and freshly issued tokens returned by register, login and refresh."""

    user: User
    tokens: TokenPair

    def to_response(self) -> dict:
        return {
            "accessToken": self.tokens.access_token,
            "refreshToken": self.tokens.refresh_token,
            "user": self.user.to_public_dict(),
        }
