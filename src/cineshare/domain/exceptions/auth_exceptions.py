"""
Authentication exceptions.

Token failures are split by cause so callers can distinguish a
malformed credential from a forged or an expired one.
"""

from cineshare.domain.exceptions.base import CineShareException


class AuthenticationError(CineShareException):
    """Base exception for authentication errors."""

    def __init__(self, message: str = "Authentication required", code: str = "UNAUTHORIZED"):
        super().__init__(message, code=code)


class TokenMalformedError(AuthenticationError):
    """Raised when a token cannot be decoded at all."""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message, code="TOKEN_MALFORMED")


class TokenSignatureError(AuthenticationError):
    """Raised when a token signature does not match the signing key."""

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message, code="TOKEN_SIGNATURE_INVALID")


class TokenExpiredError(AuthenticationError):
    """Raised when a well-formed, correctly signed token has expired."""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class TokenInvalidError(AuthenticationError):
    """Raised when a token is unusable for the requested purpose."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="TOKEN_INVALID")


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials do not match."""

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")
