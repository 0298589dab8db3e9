"""Team Schemas — team payloads for /team routes.

Invariants:
    - team_name and user_id are non-empty, stripped
    - member user_ids are unique within one payload
    - Same shape is used for request and response (members without team_name)
"""

from pydantic import BaseModel, Field, field_validator

from reviewer_service.core.domain_types import Team, TeamName, User, UserId


class TeamMember(BaseModel):
    """One member entry of a team payload."""
    user_id: str = Field(min_length=1, max_length=255)
    username: str = Field(min_length=1, max_length=255)
    is_active: bool = True

    @field_validator("user_id", "username")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty or whitespace")
        return v


class TeamSchema(BaseModel):
    """Team with its members."""
    team_name: str = Field(min_length=1, max_length=255)
    members: list[TeamMember] = Field(default_factory=list)

    @field_validator("team_name")
    @classmethod
    def strip_team_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("team_name cannot be empty or whitespace")
        return v

    @field_validator("members")
    @classmethod
    def unique_member_ids(cls, v: list[TeamMember]) -> list[TeamMember]:
        ids = [m.user_id for m in v]
        if len(ids) != len(set(ids)):
            raise ValueError("member user_id values must be unique")
        return v

    def to_domain(self) -> Team:
        team_name = TeamName(self.team_name)
        return Team(
            team_name=team_name,
            members=[
                User(
                    user_id=UserId(m.user_id),
                    username=m.username,
                    team_name=team_name,
                    is_active=m.is_active,
                )
                for m in self.members
            ],
        )

    @classmethod
    def from_domain(cls, team: Team) -> "TeamSchema":
        return cls(
            team_name=team.team_name,
            members=[
                TeamMember(
                    user_id=m.user_id, username=m.username, is_active=m.is_active,
                )
                for m in team.members
            ],
        )


class TeamAddResponse(BaseModel):
    team: TeamSchema
