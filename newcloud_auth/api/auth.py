"""Registration, login and self-service profile endpoints (mounted under /auth)."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from newcloud_auth.api.deps import get_current_user
from newcloud_auth.core.database import get_db
from newcloud_auth.core.errors import ValidationFailed
from newcloud_auth.core.tokens import TokenService, get_token_service
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
from newcloud_auth.services import accounts
from newcloud_auth.services.avatar_storage import AvatarStore, get_avatar_store

router = APIRouter()


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenResponse:
    """Create an account with the default role and return a bearer token."""
    token = accounts.register(
        db,
        tokens,
        username=body.username,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        timezone=body.timezone,
    )
    return TokenResponse(token=token)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return TokenResponse(token=accounts.login(db, tokens, body.username, body.password))


@router.get("/profile", response_model=UserProfile)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserProfile:
    return UserProfile.from_user(accounts.get_user(db, current_user.id))


@router.put("/profile", response_model=UserProfile)
def update_profile(
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserProfile:
    user = accounts.update_profile(
        db,
        current_user.id,
        username=body.username,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        timezone=body.timezone,
    )
    return UserProfile.from_user(user)


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    accounts.change_password(db, current_user.id, body.current_password, body.new_password)
    return MessageResponse(message="Password updated successfully")


@router.post("/upload-avatar", response_model=AvatarResponse)
def upload_avatar(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    store: Annotated[AvatarStore, Depends(get_avatar_store)],
    avatar: Annotated[UploadFile | None, File()] = None,
) -> AvatarResponse:
    """Store an uploaded image (multipart field 'avatar') and record its URL on the caller."""
    if avatar is None:
        raise ValidationFailed("No file uploaded")
    # Read one byte past the limit so oversize uploads are rejected without buffering them whole.
    data = avatar.file.read(store.max_bytes + 1)
    previous = accounts.get_user(db, current_user.id).profile_picture_url
    url = store.save(current_user.id, avatar.filename, avatar.content_type, data)
    try:
        accounts.update_avatar(db, current_user.id, url)
    except Exception:
        store.delete(url)
        raise
    if previous != url:
        store.delete(previous)
    return AvatarResponse(profile_picture_url=url)
