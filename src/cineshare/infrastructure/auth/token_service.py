"""
JWT token service for CineShare.

Issues and validates short-lived access tokens and longer-lived refresh
tokens. Access and refresh tokens are signed with different keys so a
refresh token can never be replayed as an access token.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from cineshare.domain.auth import TokenPair, TokenPayload, TokenType
from cineshare.domain.exceptions import (
    AuthenticationError,
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
    TokenSignatureError,
)

REQUIRED_CLAIMS = ["sub", "exp", "iat", "jti", "type"]


class TokenService:
    """
    Access/refresh token issuer and verifier.

    Validation is a pure function of the token and the signing keys.
    Failures are reported in this order: malformed, bad signature,
    expired, otherwise unusable.

    Attributes:
        access_ttl: Access token lifetime
        refresh_ttl: Refresh token lifetime
        algorithm: JWT algorithm (default: HS256)
    """

    def __init__(
        self,
        secret: Optional[str],
        refresh_secret: Optional[str],
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize token service.

        Args:
            secret: Access token signing key
            refresh_secret: Refresh token signing key
            algorithm: JWT algorithm
            access_ttl: Access token lifetime
            refresh_ttl: Refresh token lifetime
            clock: Returns the current UTC time, used at issue time

        Raises:
            ValueError: If a signing key is missing
        """
        if not secret:
            raise ValueError("jwt_secret is not configured")
        if not refresh_secret:
            raise ValueError("jwt_refresh_secret is not configured")

        self._secrets = {
            TokenType.ACCESS: secret,
            TokenType.REFRESH: refresh_secret,
        }
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self._clock = clock

    def issue(self, user_id: str, email: str, username: str) -> TokenPair:
        """
        Issue a new access/refresh token pair for a user.

        Args:
            user_id: Subject user ID
            email: User email
            username: Username

        Returns:
            TokenPair with both tokens and the refresh token ID
        """
        refresh_token_id = uuid.uuid4().hex

        access_token = self._encode(
            TokenType.ACCESS, user_id, email, username, self.access_ttl
        )
        refresh_token = self._encode(
            TokenType.REFRESH,
            user_id,
            email,
            username,
            self.refresh_ttl,
            jti=refresh_token_id,
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            refresh_token_id=refresh_token_id,
        )

    def validate(self, access_token: str) -> TokenPayload:
        """
        Validate an access token and return its payload.

        Args:
            access_token: Encoded access token

        Returns:
            Validated TokenPayload

        Raises:
            TokenMalformedError: Token cannot be decoded
            TokenSignatureError: Signature does not match
            TokenExpiredError: Token is past its expiry
            TokenInvalidError: Missing claims or wrong token type
        """
        return self._decode(access_token, TokenType.ACCESS)

    def decode_refresh(self, refresh_token: str) -> TokenPayload:
        """
        Validate a refresh token and return its payload.

        Raises:
            TokenInvalidError: On any validation failure
        """
        try:
            return self._decode(refresh_token, TokenType.REFRESH)
        except TokenInvalidError:
            raise
        except AuthenticationError as e:
            raise TokenInvalidError(f"Invalid refresh token: {e.message}")

    def refresh(self, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a fresh pair with the same identity.

        Raises:
            TokenInvalidError: If the refresh token is not valid
        """
        payload = self.decode_refresh(refresh_token)
        return self.issue(payload.sub, payload.email, payload.username)

    def _encode(
        self,
        token_type: TokenType,
        user_id: str,
        email: str,
        username: str,
        ttl: timedelta,
        jti: Optional[str] = None,
    ) -> str:
        issued_at = self._clock()
        claims = {
            "sub": user_id,
            "email": email,
            "username": username,
            "type": token_type.value,
            "jti": jti or uuid.uuid4().hex,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(claims, self._secrets[token_type], algorithm=self.algorithm)

    def _decode(self, token: str, expected_type: TokenType) -> TokenPayload:
        if not token or not isinstance(token, str):
            raise TokenMalformedError("Token is empty")

        try:
            claims = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidSignatureError:
            raise TokenSignatureError()
        except jwt.DecodeError as e:
            raise TokenMalformedError(f"Malformed token: {e}")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        if claims.get("type") != expected_type.value:
            raise TokenInvalidError(
                f"Expected {expected_type.value} token, got {claims.get('type')}"
            )

        try:
            return TokenPayload(**claims)
        except PydanticValidationError as e:
            raise TokenInvalidError(f"Invalid token claims: {e.error_count()} errors")
