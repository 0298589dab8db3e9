"""User Schemas — payloads for /users routes."""

from pydantic import BaseModel, Field

from reviewer_service.core.domain_types import User
from reviewer_service.schemas.pull_request import PullRequestShort


class UserSchema(BaseModel):
    user_id: str
    username: str
    team_name: str
    is_active: bool

    @classmethod
    def from_domain(cls, user: User) -> "UserSchema":
        return cls(
            user_id=user.user_id,
            username=user.username,
            team_name=user.team_name,
            is_active=user.is_active,
        )


class UserSetIsActive(BaseModel):
    user_id: str = Field(min_length=1, max_length=255)
    is_active: bool


class UserSetIsActiveResponse(BaseModel):
    user: UserSchema


class UserReviewsResponse(BaseModel):
    user_id: str
    pull_requests: list[PullRequestShort] = Field(default_factory=list)
