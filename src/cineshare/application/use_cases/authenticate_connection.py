"""
Use case for authenticating realtime connections.
"""

from typing import Optional

from cineshare.domain.auth import AuthenticatedUser
from cineshare.domain.exceptions import AuthenticationError
from cineshare.infrastructure.auth import TokenService


class AuthenticateConnection:
    """
    Verifies the access token presented at WebSocket handshake.

    Expiry is checked here only; an open socket is not closed when its
    token later expires.
    """

    def __init__(self, token_service: TokenService):
        self.token_service = token_service

    def execute(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Raises:
            AuthenticationError: Missing token, or any token failure
        """
        if not token:
            raise AuthenticationError("Missing access token")

        payload = self.token_service.validate(token)
        return AuthenticatedUser.from_payload(payload)
