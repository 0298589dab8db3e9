"""Pull Request Routes — create, merge, and reassign reviewers.

Invariants:
    - Responses omit createdAt / mergedAt when they are null
"""

from fastapi import APIRouter, Depends, status

from reviewer_service.api.dependencies import get_assignment_service
from reviewer_service.core.domain_types import PullRequestId, UserId
from reviewer_service.schemas.pull_request import (
    PullRequestCreate, PullRequestMerge, PullRequestReassign,
    PullRequestReassignResponse, PullRequestResponse, PullRequestSchema,
)
from reviewer_service.services.assignment_service import AssignmentService

router = APIRouter(prefix="/pullRequest", tags=["pull-requests"])


@router.post(
    "/create", response_model=PullRequestResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_pull_request(
    body: PullRequestCreate,
    service: AssignmentService = Depends(get_assignment_service),
):
    pr = await service.create_pull_request(
        PullRequestId(body.pull_request_id),
        body.pull_request_name,
        UserId(body.author_id),
    )
    return PullRequestResponse(pr=PullRequestSchema.from_domain(pr))


@router.post(
    "/merge", response_model=PullRequestResponse,
    response_model_exclude_none=True,
)
async def merge_pull_request(
    body: PullRequestMerge,
    service: AssignmentService = Depends(get_assignment_service),
):
    pr = await service.merge_pull_request(PullRequestId(body.pull_request_id))
    return PullRequestResponse(pr=PullRequestSchema.from_domain(pr))


@router.post(
    "/reassign", response_model=PullRequestReassignResponse,
    response_model_exclude_none=True,
)
async def reassign_reviewer(
    body: PullRequestReassign,
    service: AssignmentService = Depends(get_assignment_service),
):
    pr, replaced_by = await service.reassign_reviewer(
        PullRequestId(body.pull_request_id), UserId(body.old_user_id),
    )
    return PullRequestReassignResponse(
        pr=PullRequestSchema.from_domain(pr), replaced_by=replaced_by,
    )
