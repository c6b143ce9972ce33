"""
Account lifecycle: registration, login, self-service profile and admin user management.

Functions take an explicit Session (one per request) and raise AppError
subclasses; the HTTP layer maps those to status codes.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from newcloud_auth.core.config import get_settings
from newcloud_auth.core.database import transaction
from newcloud_auth.core.errors import (
    AccountDisabledError,
    ConflictError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationFailed,
)
from newcloud_auth.core.security import hash_password, verify_password
from newcloud_auth.core.tokens import TokenService
from newcloud_auth.models import Role, TeamMember, User
from newcloud_auth.models.user import ROLE_NAMES, ROLE_SITE_ADMIN, ROLE_USER

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


def _clean(value: str | None) -> str | None:
    """Strip surrounding whitespace; blank strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _get_role(db: Session, name: str) -> Role:
    role = db.scalars(select(Role).where(Role.name == name)).first()
    if role is None:
        # Roles are seeded by migration; a missing row is a deployment fault.
        raise RuntimeError(f"Role '{name}' is not present in the roles table")
    return role


def get_user(db: Session, user_id: int) -> User:
    """Return the user row or raise NotFoundError."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_role_name(db: Session, user_id: int) -> str | None:
    """Current role name of a user (fresh read), or None if the user does not exist."""
    return db.scalars(
        select(Role.name).join(User, User.role_id == Role.id).where(User.id == user_id)
    ).first()


def _ensure_unique(
    db: Session,
    username: str | None,
    email: str | None,
    exclude_user_id: int | None = None,
) -> None:
    conditions = []
    if username is not None:
        conditions.append(User.username == username)
    if email is not None:
        conditions.append(User.email == email)
    if not conditions:
        return
    stmt = select(User.id).where(or_(*conditions))
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    if db.scalars(stmt).first() is not None:
        raise ConflictError("Username or email already in use")


@contextmanager
def _unique_write(db: Session) -> Iterator[None]:
    """Transaction scope that turns a unique-constraint race into ConflictError."""
    try:
        with transaction(db):
            yield
    except IntegrityError as e:
        raise ConflictError("Username or email already in use") from e


def create_user(
    db: Session,
    *,
    username: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None,
    email: str | None = None,
    timezone: str | None = None,
    role: str = ROLE_USER,
) -> User:
    """Validate and persist a new account with a freshly salted password hash."""
    username = _clean(username)
    first_name = _clean(first_name)
    last_name = _clean(last_name)
    email = _clean(email)
    if not username or not password or not first_name or not last_name:
        raise ValidationFailed("Username, password, first name, and last name are required")
    if role not in ROLE_NAMES:
        raise ValidationFailed("Invalid role")

    _ensure_unique(db, username, email)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        timezone=_clean(timezone) or get_settings().DEFAULT_TIMEZONE,
        role_id=_get_role(db, role).id,
        is_active=True,
    )
    with _unique_write(db):
        db.add(user)
    db.refresh(user)
    return user


def register(
    db: Session,
    tokens: TokenService,
    *,
    username: str | None,
    password: str | None,
    first_name: str | None,
    last_name: str | None,
    email: str | None = None,
    timezone: str | None = None,
) -> str:
    """Create an account with the default role and return a bearer token for it."""
    user = create_user(
        db,
        username=username,
        password=password,
        first_name=first_name,
        last_name=last_name,
        email=email,
        timezone=timezone,
    )
    logger.info("User registered: user_id=%s username=%s", user.id, user.username)
    return tokens.issue(user.id, user.username)


def login(db: Session, tokens: TokenService, username: str | None, password: str | None) -> str:
    """
    Verify credentials and return a bearer token.

    Unknown username and wrong password fail with the same message so callers
    cannot probe which usernames exist.
    """
    username = _clean(username)
    if not username or not password:
        raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

    user = db.scalars(select(User).where(User.username == username)).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login failed: username=%s", username)
        raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
    if not user.is_active:
        logger.info("Login rejected for disabled account: user_id=%s", user.id)
        raise AccountDisabledError("Account is disabled")

    logger.info("Login succeeded: user_id=%s", user.id)
    return tokens.issue(user.id, user.username)


def update_profile(
    db: Session,
    user_id: int,
    *,
    username: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
    timezone: str | None = None,
) -> User:
    """
    Update the caller's own profile. None means "leave unchanged"; an empty
    email clears it. Username and email are re-checked for uniqueness.
    """
    user = get_user(db, user_id)

    new_username = _clean(username)
    if username is not None and new_username is None:
        raise ValidationFailed("Username cannot be empty")
    if first_name is not None and not _clean(first_name):
        raise ValidationFailed("First name cannot be empty")
    if last_name is not None and not _clean(last_name):
        raise ValidationFailed("Last name cannot be empty")

    new_email = _clean(email)
    _ensure_unique(
        db,
        new_username if new_username != user.username else None,
        new_email if new_email != user.email else None,
        exclude_user_id=user.id,
    )

    with _unique_write(db):
        if new_username is not None:
            user.username = new_username
        if first_name is not None:
            user.first_name = _clean(first_name)
        if last_name is not None:
            user.last_name = _clean(last_name)
        if email is not None:
            user.email = new_email
        if timezone is not None:
            user.timezone = _clean(timezone) or get_settings().DEFAULT_TIMEZONE
    db.refresh(user)
    return user


def change_password(
    db: Session,
    user_id: int,
    current_password: str | None,
    new_password: str | None,
) -> None:
    """Replace the stored hash after checking the current password."""
    if not new_password:
        raise ValidationFailed("New password is required")
    user = get_user(db, user_id)
    if not current_password or not verify_password(current_password, user.password_hash):
        raise InvalidCredentialsError("Current password is incorrect")

    with transaction(db):
        user.password_hash = hash_password(new_password)
    logger.info("Password changed: user_id=%s", user_id)


def update_avatar(db: Session, user_id: int, reference: str) -> User:
    """Record an opaque avatar reference (URL or path) against the user."""
    user = get_user(db, user_id)
    with transaction(db):
        user.profile_picture_url = reference
    db.refresh(user)
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.id)).all())


def set_role(db: Session, user_id: int, role: str | None) -> User:
    """Assign one of the closed set of roles to a user."""
    if role not in ROLE_NAMES:
        raise ValidationFailed("Invalid role")
    user = get_user(db, user_id)
    role_id = _get_role(db, role).id
    with transaction(db):
        user.role_id = role_id
    db.refresh(user)
    logger.info("User role updated: user_id=%s role=%s", user_id, role)
    return user


def _require_rank_over(db: Session, user: User, acting_user_id: int | None) -> None:
    """Only a site admin may disable or delete a site admin account."""
    if acting_user_id is None or user.role_name != ROLE_SITE_ADMIN:
        return
    if get_role_name(db, acting_user_id) != ROLE_SITE_ADMIN:
        logger.info("Site admin target denied: user_id=%s acting_user_id=%s", user.id, acting_user_id)
        raise ForbiddenError("Only site admins can manage site admin accounts")


def set_active(db: Session, user_id: int, is_active: bool, acting_user_id: int | None = None) -> User:
    """Enable or disable an account. Setting the current value again is a no-op success."""
    user = get_user(db, user_id)
    if acting_user_id == user_id and not is_active:
        raise ValidationFailed("You cannot disable your own account")
    _require_rank_over(db, user, acting_user_id)
    with transaction(db):
        user.is_active = is_active
    db.refresh(user)
    logger.info("User status updated: user_id=%s is_active=%s", user_id, is_active)
    return user


def delete_user(db: Session, user_id: int, acting_user_id: int | None = None) -> None:
    """Hard-delete a user together with all of their team memberships."""
    user = get_user(db, user_id)
    if acting_user_id == user_id:
        raise ValidationFailed("You cannot delete your own account")
    _require_rank_over(db, user, acting_user_id)
    with transaction(db):
        # Explicit cleanup as well as the FK cascade, for stores without FK enforcement.
        db.query(TeamMember).filter(TeamMember.user_id == user_id).delete(
            synchronize_session="fetch"
        )
        db.delete(user)
    logger.info("User deleted: user_id=%s", user_id)
