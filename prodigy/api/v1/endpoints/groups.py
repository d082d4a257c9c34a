"""
Group Endpoints Module

CRUD endpoints for groups plus member listing and direct member management.
Membership normally changes through join requests (see join_requests.py).
"""
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prodigy.api import deps
from prodigy.db.session import get_db
from prodigy.models.group import Group
from prodigy.models.user import User
from prodigy.schemas.base import StatusMessage
from prodigy.schemas.group import GroupCreate, GroupMemberAdd, GroupRead, GroupUpdate
from prodigy.schemas.user import UserPublic
from prodigy.services import groups

router = APIRouter()


def to_group_read(db: Session, group: Group) -> GroupRead:
    return GroupRead(**group.model_dump(), members=groups.member_ids(db, group.id))


@router.post("", response_model=GroupRead)
def create_group(
    group_in: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Create a group owned by the current user.

    The owner is the only initial member; everyone listed in ``members`` receives
    a pending join request.

    Raises:
        ValidationError (400): If the name is empty
        NotFound (404): If a listed member doesn't exist
    """
    group = groups.create_group(
        db,
        owner_id=current_user.id,
        name=group_in.name,
        description=group_in.description,
        is_private=group_in.is_private,
        proposed_members=group_in.members,
    )
    return to_group_read(db, group)


@router.get("/user/{user_id}", response_model=List[GroupRead])
def list_user_groups(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Groups the user owns or belongs to. Users can only list their own groups.
    """
    deps.require_self(user_id, current_user)
    return [to_group_read(db, group) for group in groups.list_for_user(db, user_id)]


@router.get("/{group_id}", response_model=GroupRead)
def read_group(
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Get a group with its member ids. Private groups are visible to members only.

    Raises:
        NotFound (404): If the group doesn't exist
        Forbidden (403): If the group is private and the caller is not a member
    """
    return to_group_read(db, groups.get_visible(db, group_id, current_user.id))


@router.patch("/{group_id}", response_model=GroupRead)
def update_group(
    group_id: str,
    group_in: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Update name, description or privacy of a group.

    Raises:
        NotFound (404): If the group doesn't exist
        Forbidden (403): If owner checks are enabled and the caller is not the owner
    """
    group = groups.update(db, group_id, current_user.id, group_in.model_dump(exclude_unset=True))
    return to_group_read(db, group)


@router.delete("/{group_id}", response_model=StatusMessage)
def delete_group(
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    groups.delete_group(db, group_id, current_user.id)
    return StatusMessage(message="Group deleted successfully")


@router.get("/{group_id}/members", response_model=List[UserPublic])
def list_group_members(
    group_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    groups.get_visible(db, group_id, current_user.id)
    return groups.list_members(db, group_id)


@router.post("/{group_id}/members", response_model=GroupRead)
def add_group_member(
    group_id: str,
    member_in: GroupMemberAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Add a member directly, bypassing the join-request workflow. Owner only.
    """
    group = groups.add_member_directly(db, group_id, current_user.id, member_in.user_id)
    return to_group_read(db, group)


@router.delete("/{group_id}/members/{user_id}", response_model=StatusMessage)
def remove_group_member(
    group_id: str,
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Remove a member. The owner may remove anyone but themself; members may leave.
    """
    groups.remove_member(db, group_id, current_user.id, user_id)
    return StatusMessage(message="Member removed")
