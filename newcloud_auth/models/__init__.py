"""SQLAlchemy ORM models."""

from newcloud_auth.models.base import Base
from newcloud_auth.models.team import Team, TeamMember
from newcloud_auth.models.user import Role, User

__all__ = ["Base", "Role", "Team", "TeamMember", "User"]
