from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from prodigy.models.common import RequestStatus, now_iso


class JoinRequestStatus(RequestStatus):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class JoinRequest(SQLModel, table=True):
    """
    A user's candidacy for membership in a group.

    Created pending for invited members and self-initiated requests, or directly
    accepted for the owner at group creation. ``invited_by`` is set for
    invitations; the invitee decides on those, the group owner on the rest.
    """
    __tablename__ = "join_requests"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    group_id: str = Field(foreign_key="groups.id", index=True, nullable=False)
    invited_by: Optional[str] = Field(default=None, foreign_key="users.id")
    status: JoinRequestStatus = Field(default=JoinRequestStatus.PENDING)
    requested_at: str = Field(default_factory=now_iso)
    responded_at: Optional[str] = None
