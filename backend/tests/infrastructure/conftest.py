"""Infrastructure test fixtures — SqlStorage over the in-memory database.

Invariants:
    - Retry backoff is zeroed so retry tests never sleep
"""

import pytest

from reviewer_service.infrastructure.sql_storage import SqlStorage


@pytest.fixture
def sql_storage(db_manager):
    return SqlStorage(db_manager, base_delay_ms=0)
