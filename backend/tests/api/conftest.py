"""API test fixtures — FastAPI app over the in-memory database.

Invariants:
    - get_db_manager is overridden for route dependencies
    - database.db_manager is patched for the readiness probe and restored afterwards
"""

import pytest
from httpx import ASGITransport, AsyncClient

from reviewer_service.infrastructure import database as db_module
from reviewer_service.infrastructure.database import get_db_manager
from reviewer_service.main import app


@pytest.fixture
async def client(db_manager):
    """FastAPI test client with the session manager overridden."""
    app.dependency_overrides[get_db_manager] = lambda: db_manager

    original_manager = db_module.db_manager
    db_module.db_manager = db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def team_backend(client):
    """Team backend: u1 author, u2 and u3 active, u4 inactive."""
    response = await client.post("/team/add", json={
        "team_name": "backend",
        "members": [
            {"user_id": "u1", "username": "Alice", "is_active": True},
            {"user_id": "u2", "username": "Bob", "is_active": True},
            {"user_id": "u3", "username": "Carol", "is_active": True},
            {"user_id": "u4", "username": "Dave", "is_active": False},
        ],
    })
    assert response.status_code == 201
    return response.json()["team"]
