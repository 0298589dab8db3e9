"""Root conftest — shared test configuration and database fixture.

Invariants:
    - Tests never reach a real database: settings point at in-memory SQLite
    - Every db_manager fixture gets a fresh engine and schema
    - StaticPool shares the single in-memory connection across sessions
"""

import os

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from reviewer_service.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager,
)


@pytest.fixture
async def db_manager():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    manager = DatabaseSessionManager.from_engine(engine)
    await manager.create_schema()
    yield manager
    await manager.dispose()
