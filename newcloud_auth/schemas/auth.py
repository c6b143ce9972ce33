"""Request/response schemas for registration, login and self-service profile endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from newcloud_auth.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from newcloud_auth.models.user import User


class RegisterRequest(BaseModel):
    """New account. Required fields are checked by the account service so that
    a missing value and an empty value fail the same way."""

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(default=None, max_length=USERNAME_MAX_LEN)
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)
    first_name: str | None = Field(default=None, alias="firstName", max_length=100)
    last_name: str | None = Field(default=None, alias="lastName", max_length=100)
    email: str | None = Field(default=None, max_length=255)
    timezone: str | None = Field(default=None, max_length=64)


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str | None = Field(default=None, max_length=USERNAME_MAX_LEN)
    password: str | None = Field(default=None, max_length=PASSWORD_MAX_LEN)


class TokenResponse(BaseModel):
    """Bearer token returned after registration or login."""

    token: str = Field(..., description="Signed bearer token")


class CurrentUser(BaseModel):
    """Identity resolved from a verified bearer token (request-scoped context)."""

    id: int
    username: str


class UserProfile(BaseModel):
    """Profile of a user as returned to clients (never includes the credential)."""

    id: int
    username: str
    email: str | None = None
    first_name: str
    last_name: str
    timezone: str
    role: str
    profile_picture_url: str | None = None
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            timezone=user.timezone,
            role=user.role_name,
            profile_picture_url=user.profile_picture_url,
            is_active=user.is_active,
        )


class ProfileUpdateRequest(BaseModel):
    """Mutable profile fields of the caller; omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(default=None, max_length=USERNAME_MAX_LEN)
    first_name: str | None = Field(default=None, alias="firstName", max_length=100)
    last_name: str | None = Field(default=None, alias="lastName", max_length=100)
    email: str | None = Field(default=None, max_length=255)
    timezone: str | None = Field(default=None, max_length=64)


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str | None = Field(
        default=None, alias="currentPassword", max_length=PASSWORD_MAX_LEN
    )
    new_password: str | None = Field(
        default=None, alias="newPassword", max_length=PASSWORD_MAX_LEN
    )


class AvatarResponse(BaseModel):
    profile_picture_url: str = Field(..., serialization_alias="profilePictureUrl")


class MessageResponse(BaseModel):
    message: str
