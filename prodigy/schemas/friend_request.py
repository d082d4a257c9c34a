from typing import Optional

from prodigy.models.friend_request import FriendRequestStatus
from prodigy.schemas.base import CamelModel
from prodigy.schemas.user import UserPublic


class FriendRequestCreate(CamelModel):
    to_user_id: str


class FriendRequestRead(CamelModel):
    id: str
    from_user_id: str
    to_user_id: str
    status: FriendRequestStatus
    created_at: str
    responded_at: Optional[str] = None


class FriendRequestWithSender(FriendRequestRead):
    """Pending request enriched with the sender's public profile."""
    from_user: UserPublic
