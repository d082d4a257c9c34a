from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from prodigy.models.common import RequestStatus, now_iso


class FriendRequestStatus(RequestStatus):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FriendRequest(SQLModel, table=True):
    """
    A request from one identity to befriend another.

    Only the recipient (``to_user_id``) may respond. At most one pending request
    exists per ordered (from, to) pair.
    """
    __tablename__ = "friend_requests"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    from_user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    to_user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    status: FriendRequestStatus = Field(default=FriendRequestStatus.PENDING)
    created_at: str = Field(default_factory=now_iso)
    responded_at: Optional[str] = None
