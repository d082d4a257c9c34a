from typing import Optional

from prodigy.models.join_request import JoinRequestStatus
from prodigy.schemas.base import CamelModel
from prodigy.schemas.group import GroupWithOwner
from prodigy.schemas.user import UserPublic


class JoinRequestCreate(CamelModel):
    group_id: str


class JoinRequestRead(CamelModel):
    id: str
    user_id: str
    group_id: str
    invited_by: Optional[str] = None
    status: JoinRequestStatus
    requested_at: str
    responded_at: Optional[str] = None


class JoinRequestDetail(JoinRequestRead):
    """Join request enriched with the candidate and the target group."""
    user: Optional[UserPublic] = None
    group: Optional[GroupWithOwner] = None
