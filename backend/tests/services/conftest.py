"""Service test fixtures — AssignmentService over in-memory storage.

Invariants:
    - Every test gets a fresh InMemoryStorage and a seeded random source
    - The same storage object is passed as all four collaborators
"""

import random

import pytest

from reviewer_service.services.assignment_service import AssignmentService

from tests.services.fake_storage import InMemoryStorage, make_team


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def service(storage):
    return AssignmentService(
        storage, storage, storage, storage, rng=random.Random(1234),
    )


@pytest.fixture
async def team_t(service):
    """Team T with three active members; a1 is the usual author."""
    return await service.create_team(
        make_team("T", [("a1", True), ("a2", True), ("a3", True)]),
    )
