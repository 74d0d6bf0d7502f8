from contextlib import asynccontextmanager

import httpx
import pytest

from storefront.main import app
from storefront.storage import InMemoryStorage, SqlAlchemyStorage, get_storage


@pytest.fixture
def memory_storage():
    return InMemoryStorage()


@pytest.fixture
async def sqlite_storage(tmp_path):
    storage = SqlAlchemyStorage.from_url(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await storage.create_schema()
    yield storage
    await storage.disconnect()


@pytest.fixture(params=["memory", "sqlite"])
async def storage(request, tmp_path):
    """Runs a test once per Storage implementation."""
    if request.param == "memory":
        yield InMemoryStorage()
        return

    backend = SqlAlchemyStorage.from_url(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await backend.create_schema()
    yield backend
    await backend.disconnect()


@pytest.fixture
async def client(memory_storage):
    app.dependency_overrides[get_storage] = lambda: memory_storage
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def sqlite_client(sqlite_storage):
    app.dependency_overrides[get_storage] = lambda: sqlite_storage
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def factory_for():
    """Wraps a storage in the context-manager shape the CLIs expect."""

    def make(storage):
        @asynccontextmanager
        async def factory():
            try:
                yield storage
            finally:
                await storage.disconnect()

        return factory

    return make
