"""
Join Request Endpoints Module

Requests and invitations to join groups, and the owner/user views over them.
"""
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prodigy.api import deps
from prodigy.api.v1.endpoints.groups import to_group_read
from prodigy.db.session import get_db
from prodigy.models.join_request import JoinRequest, JoinRequestStatus
from prodigy.models.user import User
from prodigy.schemas.base import DecisionUpdate, StatusMessage
from prodigy.schemas.group import GroupWithOwner
from prodigy.schemas.join_request import JoinRequestCreate, JoinRequestDetail, JoinRequestRead
from prodigy.schemas.user import UserPublic
from prodigy.services import groups, identity, join_requests

router = APIRouter()


def to_detail(db: Session, request: JoinRequest) -> JoinRequestDetail:
    """Enrich a join request with the candidate and the group (with its owner)."""
    detail = JoinRequestDetail(**request.model_dump())

    user = identity.get_by_id(db, request.user_id)
    if user:
        detail.user = UserPublic.model_validate(user)

    group = groups.get_by_id(db, request.group_id)
    if group:
        owner = identity.get_by_id(db, group.owner_id)
        detail.group = GroupWithOwner(
            **to_group_read(db, group).model_dump(),
            owner=UserPublic.model_validate(owner) if owner else None,
        )
    return detail


@router.post("", response_model=JoinRequestRead)
def request_to_join(
    request_in: JoinRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Ask to join a group.

    Raises:
        NotFound (404): If the group doesn't exist
        Forbidden (403): If the group is private
        ValidationError (400): If the user already is a member
        DuplicateRequest (400): If a pending request already exists
    """
    return join_requests.create_pending(db, current_user.id, request_in.group_id)


@router.get("/owner/{user_id}", response_model=List[JoinRequestDetail])
def list_owner_join_requests(
    user_id: str,
    status: Optional[JoinRequestStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Join requests for groups the user owns, optionally filtered by status.
    """
    deps.require_self(user_id, current_user)
    return [to_detail(db, request) for request in join_requests.list_for_owner(db, user_id, status)]


@router.get("/user/{user_id}", response_model=List[JoinRequestDetail])
def list_user_join_requests(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Pending invitations and requests addressed to the user.
    """
    deps.require_self(user_id, current_user)
    return [to_detail(db, request) for request in join_requests.list_for_user(db, user_id)]


@router.patch("/{request_id}", response_model=StatusMessage)
def answer_join_request(
    request_id: str,
    decision: DecisionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Accept or reject a pending join request.

    Invitations are answered by the invited user; self-initiated requests by the
    group owner. Accepting adds the user to the group.

    Raises:
        NotFound (404): If the request doesn't exist
        Forbidden (403): If the current user may not answer
        AlreadyHandled (400): If the request was already answered
    """
    request = join_requests.respond(db, request_id, decision.status.value, by_user_id=current_user.id)
    return StatusMessage(message=f"Join request {request.status.value}")
