"""Pull Request Schemas — payloads for /pullRequest routes.

Invariants:
    - Timestamps serialize as createdAt / mergedAt and are omitted when null
    - assigned_reviewers is always a list (possibly empty)
"""

from datetime import datetime

from pydantic import BaseModel, Field

from reviewer_service.core.domain_types import PullRequest


class PullRequestCreate(BaseModel):
    pull_request_id: str = Field(min_length=1, max_length=255)
    pull_request_name: str = Field(min_length=1, max_length=255)
    author_id: str = Field(min_length=1, max_length=255)


class PullRequestMerge(BaseModel):
    pull_request_id: str = Field(min_length=1, max_length=255)


class PullRequestReassign(BaseModel):
    pull_request_id: str = Field(min_length=1, max_length=255)
    old_user_id: str = Field(min_length=1, max_length=255)


class PullRequestSchema(BaseModel):
    """Full pull request, as returned by create / merge / reassign."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str
    assigned_reviewers: list[str] = Field(default_factory=list)
    created_at: datetime | None = Field(None, serialization_alias="createdAt")
    merged_at: datetime | None = Field(None, serialization_alias="mergedAt")

    @classmethod
    def from_domain(cls, pr: PullRequest) -> "PullRequestSchema":
        return cls(
            pull_request_id=pr.pull_request_id,
            pull_request_name=pr.pull_request_name,
            author_id=pr.author_id,
            status=pr.status.value,
            assigned_reviewers=list(pr.assigned_reviewers),
            created_at=pr.created_at,
            merged_at=pr.merged_at,
        )


class PullRequestShort(BaseModel):
    """Pull request without reviewers and timestamps (review listings)."""
    pull_request_id: str
    pull_request_name: str
    author_id: str
    status: str

    @classmethod
    def from_domain(cls, pr: PullRequest) -> "PullRequestShort":
        return cls(
            pull_request_id=pr.pull_request_id,
            pull_request_name=pr.pull_request_name,
            author_id=pr.author_id,
            status=pr.status.value,
        )


class PullRequestResponse(BaseModel):
    pr: PullRequestSchema


class PullRequestReassignResponse(BaseModel):
    pr: PullRequestSchema
    replaced_by: str
