"""API test fixtures — the real app factory wired to the per-test database.

Design Decisions:
    - ASGITransport does not run the lifespan, so the manager is injected and
      tables come from the root db_manager fixture
"""

import pytest
from httpx import ASGITransport, AsyncClient

from tracker.config import Settings
from tracker.main import create_app


@pytest.fixture
def settings(database_url) -> Settings:
    return Settings(database_url=database_url, create_tables_on_startup=False)


@pytest.fixture
async def client(settings, db_manager):
    app = create_app(settings=settings, db_manager=db_manager)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def make_user(client):
    async def _make(username: str) -> dict:
        res = await client.post("/api/v1/users", json={
            "username": username,
            "email": f"{username}@example.com",
            "full_name": username.title(),
        })
        assert res.status_code == 201, res.text
        return res.json()
    return _make
