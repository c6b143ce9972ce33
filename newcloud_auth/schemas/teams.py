"""Request/response schemas for team and membership endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from newcloud_auth.models.team import TEAM_DESCRIPTION_MAX_LEN, TEAM_NAME_MAX_LEN

TeamRole = Literal["manager", "member"]


class TeamCreateRequest(BaseModel):
    name: str | None = Field(default=None, max_length=TEAM_NAME_MAX_LEN)
    description: str | None = Field(default=None, max_length=TEAM_DESCRIPTION_MAX_LEN)


class TeamUpdateRequest(BaseModel):
    name: str | None = Field(default=None, max_length=TEAM_NAME_MAX_LEN)
    description: str | None = None


class TeamResponse(BaseModel):
    """Team attributes."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TeamListItem(TeamResponse):
    """A team the caller belongs to, with the caller's own role in it."""

    role: TeamRole


class TeamMemberItem(BaseModel):
    id: int
    username: str
    email: str | None = None
    role: TeamRole


class TeamDetailResponse(TeamResponse):
    """Team attributes, full membership list and the caller's role."""

    role: TeamRole
    members: list[TeamMemberItem]


class MemberAddRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")
    role: TeamRole = "member"


class MemberRoleRequest(BaseModel):
    role: TeamRole


class MembershipResponse(BaseModel):
    """A single (team, user, role) membership row."""

    model_config = ConfigDict(from_attributes=True)

    team_id: int
    user_id: int
    role: TeamRole
