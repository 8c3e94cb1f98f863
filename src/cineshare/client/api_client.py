"""
HTTP client for the CineShare API.

Attaches the session's bearer token to every request and recovers from
an expired access token with one coordinated refresh and retry.
"""

import logging
from typing import Any, Optional

import httpx

from cineshare.client.exceptions import ApiError
from cineshare.client.refresh_coordinator import (
    LogoutCallback,
    TokenRefreshCoordinator,
)
from cineshare.client.session import SessionStore

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Async CineShare API client.

    Usage:
        async with ApiClient("http://localhost:3001") as api:
            await api.login("ada@example.com", "Secret123")
            me = await api.me()
    """

    def __init__(
        self,
        base_url: str,
        store: Optional[SessionStore] = None,
        on_logout: Optional[LogoutCallback] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: API root, e.g. http://localhost:3001
            store: Session store shared with channel clients
            on_logout: Called when the session expires for good
            timeout: Request timeout in seconds
            transport: Custom httpx transport (ASGITransport in tests)
        """
        self.store = store or SessionStore()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )
        self.coordinator = TokenRefreshCoordinator(
            self.store, self._refresh_tokens, on_logout=on_logout
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ================================================================
    # Transport
    # ================================================================

    async def request(
        self,
        method: str,
        path: str,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request, refreshing once on 401.

        Raises:
            SessionExpiredError: The refresh after a 401 failed
        """
        response = await self._send(method, path, authenticated, **kwargs)

        if response.status_code == httpx.codes.UNAUTHORIZED and authenticated:
            logger.debug("401 on %s %s, refreshing session", method, path)
            await self.coordinator.refresh()
            response = await self._send(method, path, authenticated, **kwargs)

        return response

    async def request_json(
        self,
        method: str,
        path: str,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request and decode its JSON body.

        Raises:
            ApiError: Non-2xx response
        """
        response = await self.request(method, path, authenticated, **kwargs)
        return self._decode(response)

    async def _send(
        self, method: str, path: str, authenticated: bool, **kwargs: Any
    ) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        token = self.store.session.access_token
        if authenticated and token:
            headers["Authorization"] = f"Bearer {token}"
        return await self._client.request(method, path, headers=headers, **kwargs)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if response.is_success:
            if response.status_code == httpx.codes.NO_CONTENT or not response.content:
                return None
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        raise ApiError(
            status_code=response.status_code,
            message=body.get("message") or response.reason_phrase,
            code=body.get("error") or "API_ERROR",
            errors=body.get("errors"),
        )

    async def _refresh_tokens(self, refresh_token: str) -> dict:
        response = await self._client.post(
            "/auth/refresh", json={"refreshToken": refresh_token}
        )
        return self._decode(response)

    # ================================================================
    # Auth
    # ================================================================

    async def register(
        self,
        email: str,
        username: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> dict:
        """Create an account and sign in. Returns the user."""
        body = {"email": email, "username": username, "password": password}
        if display_name is not None:
            body["displayName"] = display_name
        return await self._sign_in("/auth/register", body)

    async def login(self, email: str, password: str) -> dict:
        """Sign in. Returns the user."""
        return await self._sign_in(
            "/auth/login", {"email": email, "password": password}
        )

    async def _sign_in(self, path: str, body: dict) -> dict:
        self.store.set_loading(True)
        try:
            data = await self.request_json("POST", path, authenticated=False, json=body)
        except ApiError as e:
            self.store.set_error(e.message)
            raise
        finally:
            self.store.set_loading(False)

        self.store.set_tokens(data["accessToken"], data["refreshToken"], data["user"])
        return data["user"]

    async def logout(self) -> None:
        """Revoke the refresh token server side and clear the session."""
        try:
            if self.store.session.access_token:
                await self.request_json("POST", "/auth/logout", authenticated=True)
        finally:
            self.store.clear()

    async def me(self) -> dict:
        user = await self.request_json("GET", "/auth/me")
        self.store.set_user(user)
        return user

    async def ensure_access_token(self) -> str:
        """Access token valid for at least a few more seconds."""
        return await self.coordinator.get_access_token()
