"""Boundary Protocols — storage contracts consumed by AssignmentService.

Invariants:
    - Core NEVER imports from infrastructure
    - Every storage call takes the transaction handle explicitly as its first argument
    - Lookups raise ResourceNotFoundError; they never return None
    - get_pull_request_by_id_locked holds a row lock on the pull request until the transaction ends
    - replace_reviewer raises ReviewerNotAssignedError when nothing was removed

Design Decisions:
    - Protocol over ABC: structural subtyping, a single adapter can satisfy all four
    - The handle is opaque to core (TxHandle); only the adapter knows it is an AsyncSession
"""

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, Protocol, TypeVar

from reviewer_service.core.domain_types import (
    PullRequest, PullRequestId, Team, TeamName, User, UserId,
)

TxHandle = Any
T = TypeVar("T")


class TeamRepository(Protocol):
    """Contract for team persistence."""
    async def team_exists(self, tx: TxHandle, team_name: TeamName) -> bool: ...
    async def create_with_members(self, tx: TxHandle, team: Team) -> None: ...
    async def get_with_members(self, tx: TxHandle, team_name: TeamName) -> Team: ...


class UserRepository(Protocol):
    """Contract for user persistence."""
    async def get_user_by_id(self, tx: TxHandle, user_id: UserId) -> User: ...
    async def set_active(
        self, tx: TxHandle, user_id: UserId, is_active: bool,
    ) -> None: ...
    async def list_active_by_team(
        self, tx: TxHandle, team_name: TeamName,
    ) -> list[User]: ...


class PullRequestRepository(Protocol):
    """Contract for pull request and reviewer-set persistence."""
    async def get_pull_request_by_id(
        self, tx: TxHandle, pull_request_id: PullRequestId,
    ) -> PullRequest: ...
    async def get_pull_request_by_id_locked(
        self, tx: TxHandle, pull_request_id: PullRequestId,
    ) -> PullRequest: ...
    async def create_pull_request(
        self, tx: TxHandle, pull_request: PullRequest,
    ) -> None: ...
    async def update_status_merged(
        self, tx: TxHandle, pull_request_id: PullRequestId, merged_at: datetime,
    ) -> None: ...
    async def replace_reviewer(
        self,
        tx: TxHandle,
        pull_request_id: PullRequestId,
        old_reviewer_id: UserId,
        new_reviewer_id: UserId,
    ) -> None: ...
    async def list_by_reviewer(
        self, tx: TxHandle, user_id: UserId,
    ) -> list[PullRequest]: ...


class TransactionManager(Protocol):
    """Contract for transaction scoping.

    When ``tx`` is given the caller already holds a transaction and ``fn``
    runs inside it; otherwise a new transaction is opened, committed on
    success and rolled back on any exception.
    """
    async def run_in_transaction(
        self,
        fn: Callable[[TxHandle], Awaitable[T]],
        *,
        tx: TxHandle | None = None,
        timeout: float | None = None,
    ) -> T: ...
