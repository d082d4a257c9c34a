"""
User Endpoints Module

Profile management for the current user, user lookup by register id, and the
friend list.
"""
import logging
import os
import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from prodigy.api import deps
from prodigy.core.config import settings
from prodigy.core.errors import NotFound, ValidationError
from prodigy.db.session import get_db
from prodigy.models.user import User
from prodigy.schemas.user import AvatarResponse, UserPublic, UserRead, UserSearchResult, UserUpdate
from prodigy.services import friendships, identity

router = APIRouter()
logger = logging.getLogger(__name__)

AVATAR_SUBDIR = "avatars"
AVATAR_URL_PREFIX = f"/uploads/{AVATAR_SUBDIR}/"


def _remove_stored_avatar(avatar_url: Optional[str]) -> None:
    # Only files we stored ourselves; external avatar URLs are left alone
    if not avatar_url or not avatar_url.startswith(AVATAR_URL_PREFIX):
        return
    path = os.path.join(settings.UPLOAD_DIR, AVATAR_SUBDIR, os.path.basename(avatar_url))
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.warning("Previous avatar %s was already gone", path)


@router.get("", response_model=List[UserPublic])
def read_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Public profiles of all users, for member selection.
    """
    return identity.list_users(db)


@router.get("/search", response_model=UserSearchResult)
def search_user(registerId: Optional[str] = None, db: Session = Depends(get_db)) -> Any:
    """
    Look up a user by register id. No authentication required.

    Raises:
        ValidationError (400): If registerId is missing
        NotFound (404): If no user has this register id
    """
    if not registerId:
        raise ValidationError("registerId is required")

    user = identity.get_by_register_id(db, registerId.strip())
    if not user:
        raise NotFound("User not found")

    return UserSearchResult(
        id=user.id,
        register_id=user.register_id,
        full_name=user.full_name,
        email=user.email,
        avatar=user.avatar,
    )


@router.get("/me", response_model=UserRead)
def read_user_me(current_user: User = Depends(deps.get_current_user)) -> Any:
    """
    Get the current authenticated user's profile.
    """
    return current_user


@router.put("/me", response_model=UserRead)
def update_user_me(
    *,
    db: Session = Depends(get_db),
    user_in: UserUpdate,
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Update the current user's own profile.

    First name, last name and email are required; phone, bio and social
    accounts are optional.

    Raises:
        ValidationError (400): If a required field is missing or the email is malformed
        DuplicateEmail (400): If the email belongs to another user
    """
    return identity.update_profile(db, current_user.id, user_in.model_dump(exclude_unset=True))


@router.post("/me/avatar", response_model=AvatarResponse)
def upload_avatar(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Upload a new avatar image for the current user.

    The file is stored under UPLOAD_DIR/avatars and served from /uploads; the
    previously stored avatar file is removed.

    Raises:
        ValidationError (400): If the file is not an image or is too large
    """
    if not (file.content_type or "").startswith("image/"):
        raise ValidationError("Only image files are allowed")

    contents = file.file.read(settings.MAX_AVATAR_BYTES + 1)
    if len(contents) > settings.MAX_AVATAR_BYTES:
        raise ValidationError("File too large")

    avatar_dir = os.path.join(settings.UPLOAD_DIR, AVATAR_SUBDIR)
    os.makedirs(avatar_dir, exist_ok=True)
    extension = os.path.splitext(file.filename or "")[1].lower()
    filename = f"avatar-{uuid.uuid4().hex}{extension}"
    with open(os.path.join(avatar_dir, filename), "wb") as f:
        f.write(contents)

    previous = current_user.avatar
    avatar_url = f"{AVATAR_URL_PREFIX}{filename}"
    user = identity.set_avatar(db, current_user.id, avatar_url)
    _remove_stored_avatar(previous)
    return AvatarResponse(
        message="Avatar uploaded successfully",
        avatar_url=avatar_url,
        user=UserRead.model_validate(user),
    )


@router.get("/friends", response_model=List[UserPublic])
def read_my_friends(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return friendships.list_friends(db, current_user.id)


@router.get("/{user_id}", response_model=UserPublic)
def read_user_by_id(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Get a user's public profile by id.

    Raises:
        NotFound (404): If the user doesn't exist
    """
    return identity.require_user(db, user_id)
