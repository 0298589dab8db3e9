"""User Routes — activity toggle and review listing."""

from fastapi import APIRouter, Depends, Query

from reviewer_service.api.dependencies import (
    get_assignment_service, required_query_text,
)
from reviewer_service.core.domain_types import UserId
from reviewer_service.schemas.pull_request import PullRequestShort
from reviewer_service.schemas.user import (
    UserReviewsResponse, UserSchema, UserSetIsActive, UserSetIsActiveResponse,
)
from reviewer_service.services.assignment_service import AssignmentService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/setIsActive", response_model=UserSetIsActiveResponse)
async def set_is_active(
    body: UserSetIsActive,
    service: AssignmentService = Depends(get_assignment_service),
):
    user = await service.set_user_active(UserId(body.user_id), body.is_active)
    return UserSetIsActiveResponse(user=UserSchema.from_domain(user))


@router.get("/getReview", response_model=UserReviewsResponse)
async def get_review(
    user_id: str = Query(min_length=1),
    service: AssignmentService = Depends(get_assignment_service),
):
    user_id = required_query_text(user_id, "user_id")
    pull_requests = await service.get_user_reviews(UserId(user_id))
    return UserReviewsResponse(
        user_id=user_id,
        pull_requests=[PullRequestShort.from_domain(pr) for pr in pull_requests],
    )
