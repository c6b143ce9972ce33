"""Team endpoints: lifecycle and membership management (mounted under /auth/teams)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from newcloud_auth.api.deps import (
    TeamAccess,
    get_current_user,
    require_team_manager,
    require_team_member,
)
from newcloud_auth.core.database import get_db
from newcloud_auth.models.team import TEAM_ROLE_MANAGER
from newcloud_auth.schemas.auth import CurrentUser, MessageResponse
from newcloud_auth.schemas.teams import (
    MemberAddRequest,
    MemberRoleRequest,
    MembershipResponse,
    TeamCreateRequest,
    TeamDetailResponse,
    TeamListItem,
    TeamMemberItem,
    TeamResponse,
    TeamUpdateRequest,
)
from newcloud_auth.services import teams

router = APIRouter()


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    body: TeamCreateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> TeamResponse:
    """Create a team; the caller becomes its first manager."""
    team = teams.create_team(db, current_user.id, body.name, body.description)
    return TeamResponse.model_validate(team)


@router.get("", response_model=list[TeamListItem])
def list_teams(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> list[TeamListItem]:
    """Teams the caller belongs to, each with the caller's role."""
    return [
        TeamListItem(**TeamResponse.model_validate(team).model_dump(), role=role)
        for team, role in teams.list_teams(db, current_user.id)
    ]


@router.get("/{team_id}", response_model=TeamDetailResponse)
def get_team_details(
    access: Annotated[TeamAccess, Depends(require_team_member)],
    db: Annotated[Session, Depends(get_db)],
) -> TeamDetailResponse:
    """Team attributes plus its members. Members only."""
    team = teams.get_team(db, access.team_id)
    members = [
        TeamMemberItem(id=user.id, username=user.username, email=user.email, role=role)
        for user, role in teams.list_members(db, access.team_id)
    ]
    return TeamDetailResponse(
        **TeamResponse.model_validate(team).model_dump(),
        role=access.role,
        members=members,
    )


@router.put("/{team_id}", response_model=TeamResponse)
def update_team(
    body: TeamUpdateRequest,
    access: Annotated[TeamAccess, Depends(require_team_manager)],
    db: Annotated[Session, Depends(get_db)],
) -> TeamResponse:
    team = teams.update_team(db, access.team_id, body.name, body.description)
    return TeamResponse.model_validate(team)


@router.delete("/{team_id}", response_model=MessageResponse)
def delete_team(
    access: Annotated[TeamAccess, Depends(require_team_manager)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    teams.delete_team(db, access.team_id)
    return MessageResponse(message="Team deleted successfully")


@router.post(
    "/{team_id}/members",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_member(
    body: MemberAddRequest,
    access: Annotated[TeamAccess, Depends(require_team_manager)],
    db: Annotated[Session, Depends(get_db)],
) -> MembershipResponse:
    membership = teams.add_member(db, access.team_id, body.user_id, body.role)
    return MembershipResponse.model_validate(membership)


@router.delete("/{team_id}/members/{user_id}", response_model=MessageResponse)
def remove_member(
    user_id: int,
    access: Annotated[TeamAccess, Depends(require_team_manager)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    teams.remove_member(db, access.team_id, user_id)
    return MessageResponse(message="Member removed successfully")


@router.put("/{team_id}/members/{user_id}/role", response_model=MembershipResponse)
def update_member_role(
    user_id: int,
    body: MemberRoleRequest,
    access: Annotated[TeamAccess, Depends(require_team_manager)],
    db: Annotated[Session, Depends(get_db)],
) -> MembershipResponse:
    """Change a member's team role; promoting to manager is role=manager."""
    if body.role == TEAM_ROLE_MANAGER:
        membership = teams.promote_to_manager(db, access.team_id, user_id)
    else:
        membership = teams.set_member_role(db, access.team_id, user_id, body.role)
    return MembershipResponse.model_validate(membership)
