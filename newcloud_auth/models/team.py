"""ORM models for teams and the per-team membership relation."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from newcloud_auth.models.base import Base

TEAM_ROLE_MANAGER = "manager"
TEAM_ROLE_MEMBER = "member"
TEAM_ROLES = (TEAM_ROLE_MANAGER, TEAM_ROLE_MEMBER)

TEAM_NAME_MAX_LEN = 255
TEAM_DESCRIPTION_MAX_LEN = 500


class Team(Base):
    """Named collaboration group. Deleting a team removes its memberships."""

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(TEAM_NAME_MAX_LEN), nullable=False)
    description = Column(String(TEAM_DESCRIPTION_MAX_LEN), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    members = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
    )


class TeamMember(Base):
    """Membership of one user in one team; (team_id, user_id) is unique."""

    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_members_team_user"),
        CheckConstraint("role IN ('manager', 'member')", name="ck_team_members_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(
        Integer,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = Column(String(32), nullable=False, default=TEAM_ROLE_MEMBER)
    joined_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    team = relationship(Team, back_populates="members")
    user = relationship("User", lazy="joined")
