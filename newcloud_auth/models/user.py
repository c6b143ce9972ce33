"""ORM models for application users and their global roles (auth and RBAC)."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    func,
    true,
)
from sqlalchemy.orm import relationship

from newcloud_auth.models.base import Base

ROLE_USER = "user"
ROLE_APPLICATION_ADMIN = "application_admin"
ROLE_SITE_ADMIN = "site_admin"

ROLE_NAMES = (ROLE_USER, ROLE_APPLICATION_ADMIN, ROLE_SITE_ADMIN)
ADMIN_ROLES = frozenset({ROLE_SITE_ADMIN, ROLE_APPLICATION_ADMIN})


class Role(Base):
    """Named privilege tier. Rows are seeded by migration and read-only at runtime."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)


class User(Base):
    """
    User account: credential, profile fields, one role and an active flag.

    password_hash is a salted bcrypt hash and must never be serialized.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True, unique=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    timezone = Column(String(64), nullable=False)
    profile_picture_url = Column(String(255), nullable=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    role = relationship(Role, lazy="joined")

    @property
    def role_name(self) -> str:
        return self.role.name
