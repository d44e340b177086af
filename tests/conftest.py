"""
Pytest configuration for OnePost backend tests.

Settings are read at import time, so the environment is prepared before
any app module is imported. HTTP tests run against SQLite in memory.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any, AsyncGenerator

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-chars!")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import get_db
from app.core.dispatcher import NotificationDispatcher
from app.core.presence import PresenceRegistry
from app.core.websocket import ConnectionGateway
from app.main import app, init_realtime
from app.models import Base


def pytest_configure(config):
    """Configure pytest-asyncio mode."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------

class FakeWebSocket:
    """Stands in for a starlette WebSocket; records every frame sent."""

    def __init__(self, fail_sends: bool = False) -> None:
        self.accepted = False
        self.fail_sends = fail_sends
        self.sent: list[dict[str, Any]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data: dict[str, Any]) -> None:
        if self.fail_sends:
            raise RuntimeError("socket is closed")
        self.sent.append(data)

    def events(self, name: str) -> list[Any]:
        return [frame["data"] for frame in self.sent if frame["event"] == name]


# ---------------------------------------------------------------------------
# Real-time components
# ---------------------------------------------------------------------------

@pytest.fixture
def registry() -> PresenceRegistry:
    return PresenceRegistry()


@pytest.fixture
def gateway(registry: PresenceRegistry) -> ConnectionGateway:
    return ConnectionGateway(registry)


@pytest.fixture
def dispatcher(
    registry: PresenceRegistry, gateway: ConnectionGateway
) -> NotificationDispatcher:
    return NotificationDispatcher(registry, gateway)


# ---------------------------------------------------------------------------
# Auth helpers
# ---------------------------------------------------------------------------

def make_token(sub: str, **claims: Any) -> str:
    payload = {
        "sub": sub,
        "exp": datetime.now(UTC) + timedelta(minutes=5),
        **claims,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def auth_headers(sub: str, **claims: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, **claims)}"}


# ---------------------------------------------------------------------------
# HTTP client against SQLite in memory
# ---------------------------------------------------------------------------

@pytest.fixture
async def db_sessionmaker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
async def client(
    db_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    ASGI client sharing the test's event loop. The lifespan does not run
    under ASGITransport, so real-time components are built here.
    """
    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with db_sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    init_realtime(app)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    await app.state.gateway.drain()
    app.dependency_overrides.pop(get_db, None)
