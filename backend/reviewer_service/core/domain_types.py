"""Domain Types — entities and identifiers shared by every layer.

Invariants:
    - UserId, TeamName, PullRequestId wrap str; ids are opaque and caller-supplied
    - PullRequestStatus is monotonic: OPEN -> MERGED, never back
    - PullRequest.created_at is always set; merged_at is None until merge
    - A pull request's author is never among its assigned_reviewers

Design Decisions:
    - Plain dataclasses, not ORM rows: core never sees SQLAlchemy objects
    - str Enum for status: serializes to JSON and to the DB column as-is
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
TeamName = NewType("TeamName", str)
PullRequestId = NewType("PullRequestId", str)

DEFAULT_REVIEWERS_PER_PULL_REQUEST = 2


class PullRequestStatus(str, Enum):
    """Pull request lifecycle states, stored in the `status` column."""
    OPEN = "OPEN"
    MERGED = "MERGED"


# ─── Entities ────────────────────────────────────────────────────

@dataclass
class User:
    """Team member. Created only as part of a team."""
    user_id: UserId
    username: str
    team_name: TeamName
    is_active: bool = True


@dataclass
class Team:
    """Named group of users. Members are supplied once, at creation."""
    team_name: TeamName
    members: list[User] = field(default_factory=list)


@dataclass
class PullRequest:
    """Pull request with its assigned reviewers."""
    pull_request_id: PullRequestId
    pull_request_name: str
    author_id: UserId
    created_at: datetime
    status: PullRequestStatus = PullRequestStatus.OPEN
    assigned_reviewers: list[UserId] = field(default_factory=list)
    merged_at: datetime | None = None

    @property
    def is_merged(self) -> bool:
        return self.status == PullRequestStatus.MERGED
