"""
FastAPI dependencies for CineShare API.

Provides dependency injection and the auth guards for routes and
WebSocket endpoints.
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, Query, WebSocket, WebSocketException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from shared.reporter import Emoji
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.di import Container
from cineshare.domain.auth import AuthenticatedUser
from cineshare.domain.exceptions import AuthenticationError

# Global container (initialized in main.py)
_container: Optional[Container] = None

bearer_scheme = HTTPBearer(auto_error=False)


def get_container() -> Container:
    """
    Get DI container instance.

    Raises:
        RuntimeError: If container not initialized
    """
    if _container is None:
        raise RuntimeError("Container not initialized")
    return _container


def set_container(container: Optional[Container]) -> None:
    """Set DI container (called from main.py and tests)."""
    global _container
    _container = container


async def get_db_session(
    container: Container = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session per request.

    Commits when the route returns, rolls back if it raises.
    """
    async with container.database.session() as session:
        yield session


# ================================================================
# HTTP guards
# ================================================================


async def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> AuthenticatedUser:
    """
    Mandatory guard: the request must carry a valid access token.

    Raises:
        AuthenticationError: Missing or invalid token (rendered as 401)
    """
    if credentials is None:
        raise AuthenticationError("Missing bearer token")

    payload = container.token_service.validate(credentials.credentials)
    return AuthenticatedUser.from_payload(payload)


async def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> Optional[AuthenticatedUser]:
    """Optional guard: any token problem yields an anonymous request."""
    if credentials is None:
        return None

    try:
        payload = container.token_service.validate(credentials.credentials)
    except AuthenticationError:
        return None
    return AuthenticatedUser.from_payload(payload)


# ================================================================
# WebSocket guard
# ================================================================


def _bearer_from_header(websocket: WebSocket) -> Optional[str]:
    header = websocket.headers.get("authorization")
    if not header:
        return None
    scheme, _, value = header.partition(" ")
    if scheme.lower() != "bearer" or not value.strip():
        return None
    return value.strip()


async def authenticate_connection(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    container: Container = Depends(get_container),
) -> AuthenticatedUser:
    """
    Authenticate a WebSocket handshake.

    Token comes from the `token` query parameter, falling back to the
    Authorization header. Failures close the socket with 1008 before it
    is accepted.

    Raises:
        WebSocketException: On any authentication failure
    """
    token = token or _bearer_from_header(websocket)
    use_case = container.get_authenticate_connection_use_case()

    try:
        return use_case.execute(token)
    except AuthenticationError as e:
        container.reporter.warning(
            f"{Emoji.AUTH.DENIED} Handshake rejected [path={websocket.url.path}]: "
            f"{e.code}",
            context="WebSocket",
        )
        raise WebSocketException(
            code=status.WS_1008_POLICY_VIOLATION, reason=e.message
        )
