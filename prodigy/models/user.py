"""
User Model Module

This module defines the User model (an identity) and the Friendship junction
table that materializes the symmetric friend set.
"""
from typing import Dict, Optional
from sqlmodel import SQLModel, Field, JSON, Column
import uuid

from prodigy.models.common import now_iso


class User(SQLModel, table=True):
    """
    User model representing a registered identity.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each user
        first_name: Given name (required)
        last_name: Family name (required)
        email: Email address used for login (unique, indexed)
        password: Bcrypt hash of the password, never serialized outward
        register_id: Short human-shareable code, e.g. "REGX7K2QD" (unique)
        avatar: URL path of the uploaded avatar image
        phone: Optional phone number
        bio: Optional free-text biography
        social_accounts: Handles keyed by network (facebook, twitter, instagram, linkedin)
        created_at: ISO timestamp of registration
        updated_at: ISO timestamp of the last profile change
    """
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None

    register_id: str = Field(unique=True, index=True, nullable=False)

    # Profile information
    avatar: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    social_accounts: Optional[Dict[str, Optional[str]]] = Field(default=None, sa_column=Column(JSON))

    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Friendship(SQLModel, table=True):
    """
    Junction table for the friend set.

    A friendship is stored as two directed rows, (a, b) and (b, a). The composite
    primary key keeps each direction unique, so re-adding is a no-op.
    """
    __tablename__ = "friendships"

    user_id: str = Field(foreign_key="users.id", primary_key=True)
    friend_id: str = Field(foreign_key="users.id", primary_key=True)
    created_at: str = Field(default_factory=now_iso)
