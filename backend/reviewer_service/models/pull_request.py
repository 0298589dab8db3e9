"""Pull Request ORM — pull requests and their reviewer assignments.

Invariants:
    - status is OPEN or MERGED; merged_at is NULL exactly while OPEN
    - created_at is non-nullable, set once by the service
    - (pull_request_id, user_id) is the reviewer primary key: no duplicate reviewers

Design Decisions:
    - Reviewers in a join table, not an array column: replace is a delete + insert
      whose rowcount detects a concurrent unassignment
    - cascade delete from pull_requests to pull_request_reviewers
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from reviewer_service.core.domain_types import PullRequestStatus
from reviewer_service.db.base import Base


class PullRequestModel(Base):
    """Pull request row."""
    __tablename__ = "pull_requests"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=PullRequestStatus.OPEN.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    merged_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )


class PullRequestReviewerModel(Base):
    """Reviewer assignment row."""
    __tablename__ = "pull_request_reviewers"

    pull_request_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("pull_requests.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), primary_key=True, index=True,
    )
