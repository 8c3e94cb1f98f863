"""
Authentication domain models for CineShare.

Defines token payload, token pair and authenticated user structures.
"""

from enum import Enum

from pydantic import BaseModel, Field


class TokenType(str, Enum):
    """Token purpose, embedded in the `type` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenPayload(BaseModel):
    """
    JWT token payload structure.

    Attributes:
        sub: Subject user ID
        email: User email at issue time
        username: Username at issue time
        type: Token purpose (access or refresh)
        jti: Unique token identifier
        iat: Issued at (Unix timestamp)
        exp: Expiration time (Unix timestamp)
    """

    sub: str = Field(..., description="Subject user ID")
    email: str = Field(..., description="User email")
    username: str = Field(..., description="Username")
    type: TokenType = Field(..., description="Token purpose")
    jti: str = Field(..., description="Unique token ID")
    iat: int = Field(..., description="Issued at time (Unix timestamp)")
    exp: int = Field(..., description="Expiration time (Unix timestamp)")

    @property
    def user_id(self) -> str:
        return self.sub


class TokenPair(BaseModel):
    """
    Access and refresh tokens issued together.

    `refresh_token_id` is the jti of the refresh token, kept so callers
    can record which refresh token is currently valid.
    """

    access_token: str
    refresh_token: str
    refresh_token_id: str


class AuthenticatedUser(BaseModel):
    """
    Identity attached to a request or connection by the auth guards.

    The token subject is exposed as `id` so downstream handlers never
    deal with raw claim names.
    """

    id: str = Field(..., description="User ID (token subject)")
    email: str
    username: str

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> "AuthenticatedUser":
        return cls(id=payload.sub, email=payload.email, username=payload.username)
