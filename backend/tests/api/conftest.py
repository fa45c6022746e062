"""API test fixtures: FastAPI test client over an in-memory SQLite store.

Invariants:
    - get_user_repository overridden to use the test session factory
    - Overrides cleared after every test

Design Decisions:
    - httpx AsyncClient + ASGITransport: lifespan not run, store injected instead
"""

import pytest
from httpx import ASGITransport, AsyncClient

from user_registry.api.dependencies import get_user_repository
from user_registry.infrastructure.user_repository import SqlAlchemyUserRepository
from user_registry.main import app


@pytest.fixture
async def client(test_session_factory):
    """FastAPI test client with repository dependency overridden."""
    async def override_get_user_repository():
        async with test_session_factory() as session:
            yield SqlAlchemyUserRepository(session)

    app.dependency_overrides[get_user_repository] = override_get_user_repository

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def use_repository():
    """Swap in an arbitrary repository object for one test."""
    def _use(repository):
        async def override():
            yield repository
        app.dependency_overrides[get_user_repository] = override
    return _use


@pytest.fixture
def make_user(client):
    """POST a user and return the record from the envelope."""
    async def _make(**fields) -> dict:
        body = {"name": "Alice", "email": "alice@example.com", **fields}
        res = await client.post("/api/users", json=body)
        assert res.status_code == 201, res.text
        return res.json()["data"]
    return _make
