"""Assignment Service — team, user and pull request operations with reviewer assignment.

Invariants:
    - Every multi-step operation runs inside one transaction; any error rolls it all back
    - Every operation reuses a caller-supplied `tx` instead of opening a nested transaction
    - A pull request author is never assigned as its reviewer
    - merge_pull_request and reassign_reviewer take the pull request row lock first,
      so concurrent calls on one pull request are serialized
    - Merging a merged pull request returns it unchanged (idempotent)
    - Reassignment never picks the author, a current reviewer, or the outgoing reviewer;
      when nobody is left it fails with NoCandidateError instead of keeping the old one
    - Timestamps are UTC and computed inside the transaction callable (safe to re-run)

Design Decisions:
    - Stateless orchestrator: holds store references, a transaction coordinator and an
      injected random.Random; no per-request state on the instance
"""

import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, TypeVar

from reviewer_service.core.domain_types import (
    DEFAULT_REVIEWERS_PER_PULL_REQUEST,
    PullRequest, PullRequestId, PullRequestStatus, Team, TeamName, User, UserId,
)
from reviewer_service.core.errors import (
    AlreadyMergedError, NoCandidateError, PullRequestExistsError,
    ResourceNotFoundError, ReviewerNotAssignedError, TeamExistsError,
)
from reviewer_service.core.repository_protocols import (
    PullRequestRepository, TeamRepository, TransactionManager, TxHandle,
    UserRepository,
)
from reviewer_service.core.select_reviewers import (
    exclude_candidates, sample_reviewers,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Sentinel: "use the service default timeout" (None means no timeout)
_DEFAULT: Any = object()

Timeout = float | None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentService:
    """Business operations over the team, user and pull request stores."""

    def __init__(
        self,
        team_store: TeamRepository,
        user_store: UserRepository,
        pr_store: PullRequestRepository,
        tx_manager: TransactionManager,
        *,
        reviewers_per_pull_request: int = DEFAULT_REVIEWERS_PER_PULL_REQUEST,
        default_timeout: float | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._teams = team_store
        self._users = user_store
        self._prs = pr_store
        self._tx = tx_manager
        self._reviewers_per_pull_request = reviewers_per_pull_request
        self._default_timeout = default_timeout
        self._rng = rng or random.Random()
        self._clock = clock

    async def _run(
        self,
        fn: Callable[[TxHandle], Awaitable[T]],
        tx: TxHandle | None,
        timeout: Timeout,
    ) -> T:
        if timeout is _DEFAULT:
            timeout = self._default_timeout
        return await self._tx.run_in_transaction(fn, tx=tx, timeout=timeout)

    # ─── Teams ──────────────────────────────────────────────────

    async def create_team(
        self,
        team: Team,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> Team:
        """Create a team with all its members, then return it as stored."""
        async def _create(tx: TxHandle) -> Team:
            if await self._teams.team_exists(tx, team.team_name):
                raise TeamExistsError(team.team_name)
            members = [
                replace(member, team_name=team.team_name) for member in team.members
            ]
            await self._teams.create_with_members(
                tx, Team(team_name=team.team_name, members=members),
            )
            return await self._teams.get_with_members(tx, team.team_name)

        created = await self._run(_create, tx, timeout)
        logger.info(
            f"Team created with {len(created.members)} member(s)",
            extra={"team_name": created.team_name},
        )
        return created

    async def get_team(
        self,
        team_name: TeamName,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> Team:
        async def _get(tx: TxHandle) -> Team:
            return await self._teams.get_with_members(tx, team_name)

        return await self._run(_get, tx, timeout)

    # ─── Users ──────────────────────────────────────────────────

    async def set_user_active(
        self,
        user_id: UserId,
        is_active: bool,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> User:
        """Toggle a user's activity flag and return the updated user."""
        async def _set(tx: TxHandle) -> User:
            user = await self._users.get_user_by_id(tx, user_id)
            await self._users.set_active(tx, user_id, is_active)
            return replace(user, is_active=is_active)

        user = await self._run(_set, tx, timeout)
        logger.info(
            f"User is_active set to {is_active}", extra={"user_id": user_id},
        )
        return user

    async def get_user_reviews(
        self,
        user_id: UserId,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> list[PullRequest]:
        """All pull requests the user is assigned to review."""
        async def _list(tx: TxHandle) -> list[PullRequest]:
            await self._users.get_user_by_id(tx, user_id)
            return await self._prs.list_by_reviewer(tx, user_id)

        return await self._run(_list, tx, timeout)

    # ─── Pull requests ──────────────────────────────────────────

    async def create_pull_request(
        self,
        pull_request_id: PullRequestId,
        pull_request_name: str,
        author_id: UserId,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> PullRequest:
        """Create an OPEN pull request with up to two reviewers from the author's team."""
        async def _create(tx: TxHandle) -> PullRequest:
            try:
                await self._prs.get_pull_request_by_id(tx, pull_request_id)
            except ResourceNotFoundError:
                pass
            else:
                raise PullRequestExistsError(pull_request_id)

            author = await self._users.get_user_by_id(tx, author_id)
            candidates = await self._users.list_active_by_team(tx, author.team_name)
            candidates = exclude_candidates(candidates, [author_id])
            reviewers = sample_reviewers(
                candidates, self._reviewers_per_pull_request, self._rng,
            )

            pull_request = PullRequest(
                pull_request_id=pull_request_id,
                pull_request_name=pull_request_name,
                author_id=author_id,
                status=PullRequestStatus.OPEN,
                assigned_reviewers=reviewers,
                created_at=self._clock(),
                merged_at=None,
            )
            await self._prs.create_pull_request(tx, pull_request)
            return pull_request

        created = await self._run(_create, tx, timeout)
        logger.info(
            f"Pull request created with reviewers {created.assigned_reviewers}",
            extra={"pull_request_id": pull_request_id, "user_id": author_id},
        )
        return created

    async def merge_pull_request(
        self,
        pull_request_id: PullRequestId,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> PullRequest:
        """Mark the pull request MERGED. Already-merged pull requests are returned as-is."""
        async def _merge(tx: TxHandle) -> PullRequest:
            pull_request = await self._prs.get_pull_request_by_id_locked(
                tx, pull_request_id,
            )
            if pull_request.is_merged:
                return pull_request

            merged_at = self._clock()
            await self._prs.update_status_merged(tx, pull_request_id, merged_at)
            logger.info(
                "Pull request merged", extra={"pull_request_id": pull_request_id},
            )
            return replace(
                pull_request, status=PullRequestStatus.MERGED, merged_at=merged_at,
            )

        return await self._run(_merge, tx, timeout)

    async def reassign_reviewer(
        self,
        pull_request_id: PullRequestId,
        old_reviewer_id: UserId,
        *,
        tx: TxHandle | None = None,
        timeout: Timeout = _DEFAULT,
    ) -> tuple[PullRequest, UserId]:
        """Replace one reviewer with a random active teammate of that reviewer.

        Returns the updated pull request and the id of the new reviewer.
        """
        async def _reassign(tx: TxHandle) -> tuple[PullRequest, UserId]:
            pull_request = await self._prs.get_pull_request_by_id_locked(
                tx, pull_request_id,
            )
            if pull_request.is_merged:
                raise AlreadyMergedError(pull_request_id)
            if old_reviewer_id not in pull_request.assigned_reviewers:
                raise ReviewerNotAssignedError(pull_request_id, old_reviewer_id)

            old_reviewer = await self._users.get_user_by_id(tx, old_reviewer_id)
            candidates = await self._users.list_active_by_team(
                tx, old_reviewer.team_name,
            )
            candidates = exclude_candidates(
                candidates,
                [old_reviewer_id, pull_request.author_id,
                 *pull_request.assigned_reviewers],
            )
            if not candidates:
                raise NoCandidateError(pull_request_id)

            new_reviewer_id = sample_reviewers(candidates, 1, self._rng)[0]
            await self._prs.replace_reviewer(
                tx, pull_request_id, old_reviewer_id, new_reviewer_id,
            )

            reviewers = [
                new_reviewer_id if rid == old_reviewer_id else rid
                for rid in pull_request.assigned_reviewers
            ]
            return replace(pull_request, assigned_reviewers=reviewers), new_reviewer_id

        updated, replaced_by = await self._run(_reassign, tx, timeout)
        logger.info(
            f"Reviewer {old_reviewer_id} replaced",
            extra={"pull_request_id": pull_request_id, "replaced_by": replaced_by},
        )
        return updated, replaced_by
