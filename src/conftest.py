import contextlib

import pytest
from httpx import ASGITransport, AsyncClient

from src.config.database import drop_local_store, init_local_store
from src.main import app


@pytest.fixture
def client_factory():
    """Build a test client with FastAPI dependency overrides applied."""

    @contextlib.asynccontextmanager
    async def _factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return _factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


@pytest.fixture
async def local_db():
    """Fresh in-memory local store tables for one test."""
    await init_local_store()
    yield
    await drop_local_store()
