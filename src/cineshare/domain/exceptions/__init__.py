"""
Domain exceptions package.
"""

from cineshare.domain.exceptions.auth_exceptions import (
    AuthenticationError,
    InvalidCredentialsError,
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
    TokenSignatureError,
)
from cineshare.domain.exceptions.base import (
    CineShareException,
    ConflictError,
    EntityNotFoundError,
    FieldError,
    ValidationError,
)

__all__ = [
    # Base
    "CineShareException",
    "ConflictError",
    "EntityNotFoundError",
    "FieldError",
    "ValidationError",
    # Auth
    "AuthenticationError",
    "InvalidCredentialsError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenMalformedError",
    "TokenSignatureError",
]
