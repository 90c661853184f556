import contextlib

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker

from rpd_hub.config import database
from rpd_hub.config.database import create_engine, run_migrations
from rpd_hub.email_service import get_notification_sender
from rpd_hub.email_service.tests.inmemory_sender import InMemoryNotificationSender
from rpd_hub.main import app


@pytest_asyncio.fixture
async def db_engine(tmp_path, monkeypatch):
    """A freshly migrated SQLite file per test, used by every session manager."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test_rpd.db'}")
    await run_migrations(engine)
    monkeypatch.setattr(
        database,
        "async_session_maker",
        async_sessionmaker(engine, expire_on_commit=False),
    )
    yield engine
    await engine.dispose()


@pytest.fixture
def notification_sender():
    """Records every email instead of sending it."""
    return InMemoryNotificationSender()


@pytest.fixture
def client_factory(db_engine, notification_sender):
    """Create a test client with the given dependency overrides."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None, raise_app_exceptions: bool = True):
        app.dependency_overrides[get_notification_sender] = lambda: notification_sender
        app.dependency_overrides.update(overrides or {})

        transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory):
    """Test client backed by the test database and the in-memory sender."""
    async with client_factory() as ac:
        yield ac
