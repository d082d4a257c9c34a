"""
Group Model Module

This module defines the Group model and the GroupMember junction table.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from prodigy.models.common import now_iso


class Group(SQLModel, table=True):
    """
    A group of identities owned by its creator.

    The owner is inserted into ``group_members`` when the group is created, so the
    owner is always a member. Other members join through accepted join requests
    or direct owner action.

    Attributes:
        id: Unique identifier (UUID)
        name: Display name (required, non-empty)
        description: Optional free text
        owner_id: Foreign key to the creating User
        is_private: Private groups only admit members the owner invites
        created_at: ISO timestamp of creation
        updated_at: ISO timestamp of the last change
    """
    __tablename__ = "groups"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str = Field(nullable=False)
    description: Optional[str] = None
    owner_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    is_private: bool = False
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


class GroupMember(SQLModel, table=True):
    """
    Junction table for group membership.

    The composite primary key of group_id and user_id gives set semantics.
    """
    __tablename__ = "group_members"

    group_id: str = Field(foreign_key="groups.id", primary_key=True)
    user_id: str = Field(foreign_key="users.id", primary_key=True)
    joined_at: str = Field(default_factory=now_iso)
