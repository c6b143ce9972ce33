"""
Request gate and authorization policies, composed as FastAPI dependencies.

Chain: bearer token -> get_current_user -> role policy or team policy -> handler.
Every policy re-reads the store on each request; nothing is cached between requests.
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from newcloud_auth.core.config import Settings, get_settings
from newcloud_auth.core.database import get_db
from newcloud_auth.core.errors import (
    AccountDisabledError,
    AppError,
    ForbiddenError,
    UnauthenticatedError,
)
from newcloud_auth.core.tokens import TokenService, get_token_service
from newcloud_auth.models import User
from newcloud_auth.models.team import TEAM_ROLE_MANAGER
from newcloud_auth.models.user import ADMIN_ROLES, ROLE_SITE_ADMIN
from newcloud_auth.schemas.auth import CurrentUser
from newcloud_auth.services import accounts, teams

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TeamAccess:
    """Caller's verified membership in the team named by the route."""

    team_id: int
    user: CurrentUser
    role: str


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CurrentUser:
    """Dependency: require a valid Bearer token and return the caller's identity. Raises 401 if missing or invalid."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("No token provided")
    try:
        claims = tokens.verify(credentials.credentials)
    except AppError as e:
        raise UnauthenticatedError(e.message) from e

    if settings.AUTH_CHECK_ACTIVE:
        # Tokens are stateless; this read makes disable/delete take effect immediately.
        user = db.get(User, claims.user_id)
        if user is None:
            raise UnauthenticatedError("User not found")
        if not user.is_active:
            raise AccountDisabledError("Account is disabled")
        # The stored username wins over the claim, which goes stale after a rename.
        return CurrentUser(id=user.id, username=user.username)

    return CurrentUser(id=claims.user_id, username=claims.username)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: caller's role must be site_admin or application_admin. Raises 403 otherwise."""
    role = accounts.get_role_name(db, current_user.id)
    if role not in ADMIN_ROLES:
        logger.info("Admin access denied: user_id=%s role=%s", current_user.id, role)
        raise ForbiddenError("Access denied")
    return current_user


def require_site_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: caller's role must be site_admin (role escalation operations)."""
    role = accounts.get_role_name(db, current_user.id)
    if role != ROLE_SITE_ADMIN:
        logger.info("Site admin access denied: user_id=%s role=%s", current_user.id, role)
        raise ForbiddenError("Access denied")
    return current_user


def require_team_member(
    team_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> TeamAccess:
    """Dependency: caller must hold a membership in the team. Unknown team is 404, non-member 403."""
    teams.get_team(db, team_id)
    membership = teams.get_membership(db, team_id, current_user.id)
    if membership is None:
        raise ForbiddenError("You are not a member of this team")
    return TeamAccess(team_id=team_id, user=current_user, role=membership.role)


def require_team_manager(
    access: Annotated[TeamAccess, Depends(require_team_member)],
) -> TeamAccess:
    """Dependency: caller must be a manager of the team."""
    if access.role != TEAM_ROLE_MANAGER:
        raise ForbiddenError("Only team managers can perform this action")
    return access
