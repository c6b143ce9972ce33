"""
Team lifecycle: create, list, detail, update, delete and membership management.

Permission checks (member / manager) run as request dependencies before these
functions are called; here we only enforce data invariants.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from newcloud_auth.core.database import transaction
from newcloud_auth.core.errors import ConflictError, NotFoundError, ValidationFailed
from newcloud_auth.models import Team, TeamMember, User
from newcloud_auth.models.team import (
    TEAM_DESCRIPTION_MAX_LEN,
    TEAM_NAME_MAX_LEN,
    TEAM_ROLE_MANAGER,
    TEAM_ROLES,
)

logger = logging.getLogger(__name__)


def _validate_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationFailed("Team name is required")
    if len(name) > TEAM_NAME_MAX_LEN:
        raise ValidationFailed(f"Team name must be at most {TEAM_NAME_MAX_LEN} characters")
    return name


def _validate_description(description: str | None) -> str | None:
    if description is None:
        return None
    description = description.strip()
    if len(description) > TEAM_DESCRIPTION_MAX_LEN:
        raise ValidationFailed(
            f"Description must be at most {TEAM_DESCRIPTION_MAX_LEN} characters"
        )
    return description or None


def _validate_role(role: str | None) -> str:
    if role not in TEAM_ROLES:
        raise ValidationFailed("Invalid team role")
    return role


def get_team(db: Session, team_id: int) -> Team:
    team = db.get(Team, team_id)
    if team is None:
        raise NotFoundError("Team not found")
    return team


def get_membership(db: Session, team_id: int, user_id: int) -> TeamMember | None:
    """Fresh read of the (team, user) membership row, if any."""
    return db.scalars(
        select(TeamMember).where(
            TeamMember.team_id == team_id,
            TeamMember.user_id == user_id,
        )
    ).first()


def _require_membership(db: Session, team_id: int, user_id: int) -> TeamMember:
    membership = get_membership(db, team_id, user_id)
    if membership is None:
        raise NotFoundError("Team member not found")
    return membership


def _manager_count(db: Session, team_id: int) -> int:
    return db.scalar(
        select(func.count(TeamMember.id)).where(
            TeamMember.team_id == team_id,
            TeamMember.role == TEAM_ROLE_MANAGER,
        )
    ) or 0


def create_team(
    db: Session,
    creator_id: int,
    name: str | None,
    description: str | None = None,
) -> Team:
    """Create a team and enroll its creator as manager in one transaction."""
    name = _validate_name(name)
    description = _validate_description(description)

    team = Team(name=name, description=description)
    with transaction(db):
        db.add(team)
        db.flush()
        db.add(TeamMember(team_id=team.id, user_id=creator_id, role=TEAM_ROLE_MANAGER))
    db.refresh(team)
    logger.info("Team created: team_id=%s creator_id=%s", team.id, creator_id)
    return team


def list_teams(db: Session, user_id: int) -> list[tuple[Team, str]]:
    """Every team the user belongs to, paired with the user's role in it."""
    rows = db.execute(
        select(Team, TeamMember.role)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.user_id == user_id)
        .order_by(Team.id)
    ).all()
    return [(team, role) for team, role in rows]


def list_members(db: Session, team_id: int) -> list[tuple[User, str]]:
    rows = db.execute(
        select(User, TeamMember.role)
        .join(TeamMember, TeamMember.user_id == User.id)
        .where(TeamMember.team_id == team_id)
        .order_by(TeamMember.id)
    ).all()
    return [(user, role) for user, role in rows]


def update_team(db: Session, team_id: int, name: str | None, description: str | None) -> Team:
    team = get_team(db, team_id)
    name = _validate_name(name)
    description = _validate_description(description)
    with transaction(db):
        team.name = name
        team.description = description
        team.updated_at = datetime.now(UTC)
    db.refresh(team)
    logger.info("Team updated: team_id=%s", team_id)
    return team


def delete_team(db: Session, team_id: int) -> None:
    """Hard-delete a team; no membership rows survive it."""
    team = get_team(db, team_id)
    with transaction(db):
        # Members go with the team through the relationship cascade.
        db.delete(team)
    logger.info("Team deleted: team_id=%s", team_id)


def add_member(db: Session, team_id: int, user_id: int, role: str | None) -> TeamMember:
    """Insert a membership; an existing (team, user) pair is a conflict."""
    role = _validate_role(role)
    get_team(db, team_id)
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    if get_membership(db, team_id, user_id) is not None:
        raise ConflictError("User is already a member of this team")

    membership = TeamMember(team_id=team_id, user_id=user_id, role=role)
    try:
        with transaction(db):
            db.add(membership)
    except IntegrityError as e:
        # Concurrent add of the same pair lost the race on the unique constraint.
        raise ConflictError("User is already a member of this team") from e
    db.refresh(membership)
    logger.info("Team member added: team_id=%s user_id=%s role=%s", team_id, user_id, role)
    return membership


def remove_member(db: Session, team_id: int, user_id: int) -> None:
    membership = _require_membership(db, team_id, user_id)
    if membership.role == TEAM_ROLE_MANAGER and _manager_count(db, team_id) <= 1:
        raise ValidationFailed("Cannot remove the last manager of a team")
    with transaction(db):
        db.delete(membership)
    logger.info("Team member removed: team_id=%s user_id=%s", team_id, user_id)


def set_member_role(db: Session, team_id: int, user_id: int, role: str | None) -> TeamMember:
    role = _validate_role(role)
    membership = _require_membership(db, team_id, user_id)
    if (
        membership.role == TEAM_ROLE_MANAGER
        and role != TEAM_ROLE_MANAGER
        and _manager_count(db, team_id) <= 1
    ):
        raise ValidationFailed("Cannot demote the last manager of a team")
    with transaction(db):
        membership.role = role
    db.refresh(membership)
    logger.info("Team member role updated: team_id=%s user_id=%s role=%s", team_id, user_id, role)
    return membership


def promote_to_manager(db: Session, team_id: int, user_id: int) -> TeamMember:
    """Make an existing member a manager; already a manager is a no-op success."""
    return set_member_role(db, team_id, user_id, TEAM_ROLE_MANAGER)
