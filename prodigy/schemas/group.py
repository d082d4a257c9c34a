from typing import List, Optional

from prodigy.schemas.base import CamelModel
from prodigy.schemas.user import UserPublic


class GroupCreate(CamelModel):
    name: str
    description: Optional[str] = None
    is_private: bool = False
    # Identities to invite; each gets a pending join request
    members: List[str] = []


class GroupUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_private: Optional[bool] = None


class GroupMemberAdd(CamelModel):
    user_id: str


class GroupRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    is_private: bool
    members: List[str] = []
    created_at: str
    updated_at: Optional[str] = None


class GroupWithOwner(GroupRead):
    owner: Optional[UserPublic] = None
