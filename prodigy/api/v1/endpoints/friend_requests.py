"""
Friend Request Endpoints Module

Sending, listing and answering friend requests, and reading friend lists.
"""
from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prodigy.api import deps
from prodigy.db.session import get_db
from prodigy.models.user import User
from prodigy.schemas.base import DecisionUpdate, StatusMessage
from prodigy.schemas.friend_request import FriendRequestCreate, FriendRequestRead, FriendRequestWithSender
from prodigy.schemas.user import UserPublic
from prodigy.services import friendships

router = APIRouter()


@router.post("", response_model=FriendRequestRead)
def send_friend_request(
    request_in: FriendRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Send a friend request from the current user to ``toUserId``.

    Raises:
        NotFound (404): If the recipient doesn't exist
        DuplicateRequest (400): If a pending request to this user already exists
    """
    return friendships.send_request(db, current_user.id, request_in.to_user_id)


@router.get("/pending", response_model=List[FriendRequestWithSender])
def read_pending_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Pending requests addressed to the current user, newest first, each with the
    sender's public profile.
    """
    return [
        FriendRequestWithSender(
            **FriendRequestRead.model_validate(request).model_dump(),
            from_user=UserPublic.model_validate(sender),
        )
        for request, sender in friendships.list_pending(db, current_user.id)
    ]


@router.get("/friends", response_model=List[UserPublic])
def read_friends(
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return friendships.list_friends(db, current_user.id)


@router.get("/accepted/{user_id}", response_model=List[UserPublic])
def read_accepted_friends(user_id: str, db: Session = Depends(get_db)) -> Any:
    """
    Counterparts of every accepted request involving ``user_id``. No authentication required.
    """
    return friendships.list_accepted_counterparts(db, user_id)


@router.patch("/{request_id}", response_model=StatusMessage)
def answer_friend_request(
    request_id: str,
    decision: DecisionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Accept or reject a pending request. Only its recipient may answer.

    Raises:
        NotFound (404): If the request doesn't exist
        Forbidden (403): If the current user is not the recipient
        AlreadyHandled (400): If the request was already answered
    """
    request = friendships.respond(db, request_id, current_user.id, decision.status.value)
    return StatusMessage(message=f"Friend request {request.status.value}")
