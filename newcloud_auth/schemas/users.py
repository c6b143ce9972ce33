"""Request/response schemas for the admin user-management endpoints."""

from pydantic import BaseModel, Field

from newcloud_auth.schemas.auth import UserProfile


class RoleUpdateRequest(BaseModel):
    """Target role; validated against the closed role set by the service."""

    role: str | None = Field(default=None, max_length=50)


class StatusUpdateRequest(BaseModel):
    is_active: bool


class StatusUpdateResponse(BaseModel):
    message: str
    user: UserProfile

