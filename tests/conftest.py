"""Fixtures partagees / Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from diesel_log.config import Settings
from diesel_log.database import RecordStore
from diesel_log.main import create_app
from diesel_log.services.record_service import RecordService


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'diesel_test.db'}",
        RATE_LIMIT_ENABLED=False,
        DEBUG=True,
    )


@pytest.fixture
async def store(settings):
    store = RecordStore(settings.DATABASE_URL)
    await store.init()
    yield store
    await store.dispose()


@pytest.fixture
def service(store):
    return RecordService(store)


@pytest.fixture
async def client(settings, store):
    app = create_app(settings, store=store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
