"""Pydantic request/response schemas."""

from newcloud_auth.schemas.auth import (
    AvatarResponse,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserProfile,
)
from newcloud_auth.schemas.health import HealthResponse
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
from newcloud_auth.schemas.users import (
    RoleUpdateRequest,
    StatusUpdateRequest,
    StatusUpdateResponse,
)

__all__ = [
    "AvatarResponse",
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MemberAddRequest",
    "MemberRoleRequest",
    "MembershipResponse",
    "MessageResponse",
    "ProfileUpdateRequest",
    "RegisterRequest",
    "RoleUpdateRequest",
    "StatusUpdateRequest",
    "StatusUpdateResponse",
    "TeamCreateRequest",
    "TeamDetailResponse",
    "TeamListItem",
    "TeamMemberItem",
    "TeamResponse",
    "TeamUpdateRequest",
    "TokenResponse",
    "UserProfile",
]
