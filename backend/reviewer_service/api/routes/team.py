"""Team Routes — create a team with members, read it back."""

from fastapi import APIRouter, Depends, Query, status

from reviewer_service.api.dependencies import (
    get_assignment_service, required_query_text,
)
from reviewer_service.core.domain_types import TeamName
from reviewer_service.schemas.team import TeamAddResponse, TeamSchema
from reviewer_service.services.assignment_service import AssignmentService

router = APIRouter(prefix="/team", tags=["teams"])


@router.post(
    "/add", response_model=TeamAddResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_team(
    body: TeamSchema,
    service: AssignmentService = Depends(get_assignment_service),
):
    created = await service.create_team(body.to_domain())
    return TeamAddResponse(team=TeamSchema.from_domain(created))


@router.get("/get", response_model=TeamSchema)
async def get_team(
    team_name: str = Query(min_length=1),
    service: AssignmentService = Depends(get_assignment_service),
):
    team = await service.get_team(
        TeamName(required_query_text(team_name, "team_name")),
    )
    return TeamSchema.from_domain(team)
