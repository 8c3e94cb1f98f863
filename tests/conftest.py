"""
Test fixtures and configuration.
"""

from typing import AsyncGenerator, Generator, List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from shared.reporter import SystemReporter
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.config.settings import Settings
from cineshare.infrastructure.auth import TokenService
from cineshare.infrastructure.persistence import Database
from cineshare.main import CineShareApp
from cineshare.presentation.api.dependencies import set_container

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-access-secret-0123456789abcdef-0123456789"
TEST_JWT_REFRESH_SECRET = "test-refresh-secret-0123456789abcdef-012345678"


class FakeWebSocket:
    """Records frames written by the server; can simulate a dead peer."""

    def __init__(self, fail: bool = False):
        self.sent: List[dict] = []
        self.fail = fail
        self.close_code: Optional[int] = None

    async def send_json(self, data: dict) -> None:
        if self.fail:
            raise RuntimeError("Cannot call send once a close message has been sent")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None:
        self.close_code = code

    def events(self, name: Optional[str] = None) -> List[dict]:
        return [f for f in self.sent if name is None or f["event"] == name]


@pytest.fixture
def fake_socket():
    """Factory for FakeWebSocket instances."""
    return FakeWebSocket


@pytest.fixture
def reporter() -> SystemReporter:
    return SystemReporter.from_level_name("cineshare-test", "warning")


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory service."""
    return Settings(
        ENV="test",
        database_url=TEST_DATABASE_URL,
        jwt_secret=TEST_JWT_SECRET,
        jwt_refresh_secret=TEST_JWT_REFRESH_SECRET,
        heartbeat_interval=300,
        shutdown_grace_period=0,
        log_level="warning",
    )


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(
        secret=TEST_JWT_SECRET,
        refresh_secret=TEST_JWT_REFRESH_SECRET,
    )


@pytest_asyncio.fixture
async def test_db() -> AsyncGenerator[Database, None]:
    """Fresh in-memory database with all tables."""
    db = Database(database_url=TEST_DATABASE_URL)
    await db.connect()
    await db.create_tables()

    yield db

    await db.disconnect()


@pytest_asyncio.fixture
async def db_session(test_db: Database) -> AsyncGenerator[AsyncSession, None]:
    """Provide database session for tests."""
    async with test_db.session() as session:
        yield session


@pytest.fixture
def cineshare_app(settings: Settings) -> Generator[CineShareApp, None, None]:
    app = CineShareApp(settings)
    yield app
    set_container(None)


@pytest.fixture
def client(cineshare_app: CineShareApp) -> Generator[TestClient, None, None]:
    """Synchronous client running the full lifespan (used for WebSockets)."""
    with TestClient(cineshare_app.app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def api_client(
    cineshare_app: CineShareApp,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client over ASGITransport.

    ASGITransport does not run the lifespan, so storage is prepared here.
    """
    database = cineshare_app.container.database
    await database.connect()
    await database.create_tables()

    transport = ASGITransport(app=cineshare_app.app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http

    await database.disconnect()
