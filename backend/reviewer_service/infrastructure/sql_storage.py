"""SQL Storage — SQLAlchemy adapter implementing every boundary protocol.

Invariants:
    - Implements TeamRepository, UserRepository, PullRequestRepository and TransactionManager
    - Every store method runs on the AsyncSession handed in as `tx`; it never opens its own
    - Unique-constraint hits on insert become AlreadyExistsError subclasses, not DatabaseError
    - get_pull_request_by_id_locked issues SELECT ... FOR UPDATE (a no-op on SQLite)
    - run_in_transaction reuses a caller-supplied `tx`; otherwise opens a fresh session per call
    - Only retryable DatabaseErrors (serialization failure, deadlock) are retried;
      the whole callable is re-run on a new transaction
    - One timeout covers every attempt and backoff sleep; expiry raises OperationTimeoutError
    - Timestamps are returned timezone-aware (UTC) regardless of driver

Design Decisions:
    - Core insert()/update()/delete() for writes: rowcounts and per-row failures
      are visible, and no ORM identity map sits between two inserts of the same id
    - Reviewers loaded with a second query instead of array_agg: portable to SQLite
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reviewer_service.core.domain_types import (
    PullRequest, PullRequestId, PullRequestStatus, Team, TeamName, User, UserId,
)
from reviewer_service.core.errors import (
    DatabaseError, OperationTimeoutError, PullRequestExistsError,
    ResourceNotFoundError, ReviewerNotAssignedError, TeamExistsError,
    UserExistsError,
)
from reviewer_service.infrastructure.database import (
    DatabaseSessionManager, is_unique_violation,
)
from reviewer_service.models.pull_request import (
    PullRequestModel, PullRequestReviewerModel,
)
from reviewer_service.models.team import TeamModel
from reviewer_service.models.user import UserModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_user(row: UserModel) -> User:
    return User(
        user_id=UserId(row.id),
        username=row.name,
        team_name=TeamName(row.team_name),
        is_active=row.is_active,
    )


def _to_pull_request(row: PullRequestModel, reviewers: list[str]) -> PullRequest:
    return PullRequest(
        pull_request_id=PullRequestId(row.id),
        pull_request_name=row.name,
        author_id=UserId(row.author_id),
        status=PullRequestStatus(row.status),
        assigned_reviewers=[UserId(r) for r in reviewers],
        created_at=_as_utc(row.created_at),
        merged_at=_as_utc(row.merged_at),
    )


class SqlStorage:
    """Team, user and pull request stores plus the transaction coordinator."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        max_retries: int = 3,
        base_delay_ms: int = 50,
        max_delay_ms: int = 1000,
    ):
        self._db = db
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    # ─── Transactions ───────────────────────────────────────────

    async def run_in_transaction(
        self,
        fn: Callable[[AsyncSession], Awaitable[T]],
        *,
        tx: AsyncSession | None = None,
        timeout: float | None = None,
    ) -> T:
        if tx is not None:
            return await fn(tx)

        try:
            async with asyncio.timeout(timeout):
                return await self._run_with_retries(fn)
        except TimeoutError as e:
            logger.warning(f"Transaction timed out after {timeout}s")
            raise OperationTimeoutError(timeout) from e

    async def _run_with_retries(
        self, fn: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Re-run fn on a fresh transaction while it fails with a retryable error."""
        attempt = 0
        while True:
            try:
                async with self._db.transaction() as session:
                    return await fn(session)
            except DatabaseError as e:
                if not e.retryable or attempt >= self.max_retries:
                    raise
            attempt += 1
            delay = self._backoff_seconds(attempt - 1)
            logger.warning(
                f"Transaction conflict, retrying in {delay:.3f}s",
                extra={"attempt": attempt},
            )
            await asyncio.sleep(delay)

    def _backoff_seconds(self, attempt: int) -> float:
        """Exponential backoff with ±25% jitter."""
        delay_ms = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        return delay_ms * random.uniform(0.75, 1.25) / 1000

    # ─── Teams ──────────────────────────────────────────────────

    async def team_exists(self, tx: AsyncSession, team_name: TeamName) -> bool:
        result = await tx.execute(
            select(TeamModel.name).where(TeamModel.name == team_name),
        )
        return result.scalar_one_or_none() is not None

    async def create_with_members(self, tx: AsyncSession, team: Team) -> None:
        """Insert the team and all members. Call only inside a transaction."""
        try:
            await tx.execute(insert(TeamModel).values(name=team.team_name))
        except IntegrityError as e:
            if is_unique_violation(e):
                raise TeamExistsError(team.team_name) from e
            raise

        for member in team.members:
            try:
                await tx.execute(
                    insert(UserModel).values(
                        id=member.user_id,
                        name=member.username,
                        team_name=team.team_name,
                        is_active=member.is_active,
                    ),
                )
            except IntegrityError as e:
                if is_unique_violation(e):
                    raise UserExistsError(member.user_id) from e
                raise

    async def get_with_members(
        self, tx: AsyncSession, team_name: TeamName,
    ) -> Team:
        if not await self.team_exists(tx, team_name):
            raise ResourceNotFoundError("Team", team_name)
        result = await tx.execute(
            select(UserModel)
            .where(UserModel.team_name == team_name)
            .order_by(UserModel.id),
        )
        return Team(
            team_name=team_name,
            members=[_to_user(row) for row in result.scalars().all()],
        )

    # ─── Users ──────────────────────────────────────────────────

    async def get_user_by_id(self, tx: AsyncSession, user_id: UserId) -> User:
        result = await tx.execute(
            select(UserModel).where(UserModel.id == user_id),
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise ResourceNotFoundError("User", user_id)
        return _to_user(row)

    async def set_active(
        self, tx: AsyncSession, user_id: UserId, is_active: bool,
    ) -> None:
        result = await tx.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(is_active=is_active),
        )
        if result.rowcount == 0:
            raise ResourceNotFoundError("User", user_id)

    async def list_active_by_team(
        self, tx: AsyncSession, team_name: TeamName,
    ) -> list[User]:
        result = await tx.execute(
            select(UserModel)
            .where(UserModel.team_name == team_name, UserModel.is_active.is_(True))
            .order_by(UserModel.id),
        )
        return [_to_user(row) for row in result.scalars().all()]

    # ─── Pull requests ──────────────────────────────────────────

    async def get_pull_request_by_id(
        self, tx: AsyncSession, pull_request_id: PullRequestId,
    ) -> PullRequest:
        return await self._load_pull_request(tx, pull_request_id, lock=False)

    async def get_pull_request_by_id_locked(
        self, tx: AsyncSession, pull_request_id: PullRequestId,
    ) -> PullRequest:
        return await self._load_pull_request(tx, pull_request_id, lock=True)

    async def _load_pull_request(
        self, tx: AsyncSession, pull_request_id: PullRequestId, lock: bool,
    ) -> PullRequest:
        query = select(PullRequestModel).where(
            PullRequestModel.id == pull_request_id,
        )
        if lock:
            query = query.with_for_update()
        row = (await tx.execute(query)).scalar_one_or_none()
        if row is None:
            raise ResourceNotFoundError("PullRequest", pull_request_id)
        reviewers = await self._reviewers_by_pull_request(tx, [row.id])
        return _to_pull_request(row, reviewers.get(row.id, []))

    async def _reviewers_by_pull_request(
        self, tx: AsyncSession, pull_request_ids: Sequence[str],
    ) -> dict[str, list[str]]:
        if not pull_request_ids:
            return {}
        result = await tx.execute(
            select(
                PullRequestReviewerModel.pull_request_id,
                PullRequestReviewerModel.user_id,
            )
            .where(PullRequestReviewerModel.pull_request_id.in_(pull_request_ids))
            .order_by(PullRequestReviewerModel.user_id),
        )
        reviewers: dict[str, list[str]] = {}
        for pr_id, user_id in result.all():
            reviewers.setdefault(pr_id, []).append(user_id)
        return reviewers

    async def create_pull_request(
        self, tx: AsyncSession, pull_request: PullRequest,
    ) -> None:
        try:
            await tx.execute(
                insert(PullRequestModel).values(
                    id=pull_request.pull_request_id,
                    name=pull_request.pull_request_name,
                    author_id=pull_request.author_id,
                    status=pull_request.status.value,
                    created_at=pull_request.created_at,
                    merged_at=pull_request.merged_at,
                ),
            )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise PullRequestExistsError(pull_request.pull_request_id) from e
            raise

        if pull_request.assigned_reviewers:
            await tx.execute(
                insert(PullRequestReviewerModel),
                [
                    {"pull_request_id": pull_request.pull_request_id, "user_id": uid}
                    for uid in pull_request.assigned_reviewers
                ],
            )

    async def update_status_merged(
        self,
        tx: AsyncSession,
        pull_request_id: PullRequestId,
        merged_at: datetime,
    ) -> None:
        await tx.execute(
            update(PullRequestModel)
            .where(PullRequestModel.id == pull_request_id)
            .values(status=PullRequestStatus.MERGED.value, merged_at=merged_at),
        )

    async def replace_reviewer(
        self,
        tx: AsyncSession,
        pull_request_id: PullRequestId,
        old_reviewer_id: UserId,
        new_reviewer_id: UserId,
    ) -> None:
        result = await tx.execute(
            delete(PullRequestReviewerModel).where(
                PullRequestReviewerModel.pull_request_id == pull_request_id,
                PullRequestReviewerModel.user_id == old_reviewer_id,
            ),
        )
        if result.rowcount == 0:
            raise ReviewerNotAssignedError(pull_request_id, old_reviewer_id)
        await tx.execute(
            insert(PullRequestReviewerModel).values(
                pull_request_id=pull_request_id, user_id=new_reviewer_id,
            ),
        )

    async def list_by_reviewer(
        self, tx: AsyncSession, user_id: UserId,
    ) -> list[PullRequest]:
        result = await tx.execute(
            select(PullRequestModel)
            .join(
                PullRequestReviewerModel,
                PullRequestReviewerModel.pull_request_id == PullRequestModel.id,
            )
            .where(PullRequestReviewerModel.user_id == user_id)
            .order_by(PullRequestModel.created_at, PullRequestModel.id),
        )
        rows = result.scalars().all()
        reviewers = await self._reviewers_by_pull_request(tx, [r.id for r in rows])
        return [_to_pull_request(row, reviewers.get(row.id, [])) for row in rows]
