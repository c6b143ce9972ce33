"""Admin user management: list, role change, enable/disable and delete."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from newcloud_auth.api.deps import require_admin, require_site_admin
from newcloud_auth.core.database import get_db
from newcloud_auth.schemas.auth import CurrentUser, MessageResponse, UserProfile
from newcloud_auth.schemas.users import (
    RoleUpdateRequest,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from newcloud_auth.services import accounts

router = APIRouter()


@router.get("", response_model=list[UserProfile])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserProfile]:
    """List all users (admin only)."""
    return [UserProfile.from_user(u) for u in accounts.list_users(db)]


@router.put("/{user_id}/role", response_model=MessageResponse)
def update_user_role(
    user_id: int,
    body: RoleUpdateRequest,
    _admin: Annotated[CurrentUser, Depends(require_site_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change a user's global role. Restricted to site admins."""
    accounts.set_role(db, user_id, body.role)
    return MessageResponse(message="User role updated successfully")


@router.put("/{user_id}/status", response_model=StatusUpdateResponse)
def update_user_status(
    user_id: int,
    body: StatusUpdateRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> StatusUpdateResponse:
    user = accounts.set_active(db, user_id, body.is_active, acting_user_id=admin.id)
    state = "enabled" if user.is_active else "disabled"
    return StatusUpdateResponse(
        message=f"User {state} successfully",
        user=UserProfile.from_user(user),
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    accounts.delete_user(db, user_id, acting_user_id=admin.id)
    return MessageResponse(message="User deleted successfully")
