"""
Relationship ledger: friend requests and the friend set they materialize.

Per ordered (from, to) pair a request moves NoRequest -> pending ->
accepted | rejected. Accepting adds each identity to the other's friend set.
"""
import logging
from typing import List, Tuple

from sqlalchemy import or_
from sqlmodel import Session, select

from prodigy.core import events
from prodigy.core.errors import DuplicateRequest, Forbidden, NotFound, ValidationError
from prodigy.models.common import now_iso
from prodigy.models.friend_request import FriendRequest, FriendRequestStatus
from prodigy.models.user import Friendship, User
from prodigy.services.identity import get_by_id, require_user

logger = logging.getLogger(__name__)


def send_request(db: Session, from_user_id: str, to_user_id: str) -> FriendRequest:
    """
    Create a pending friend request.

    Raises:
        ValidationError: If the user befriends themself
        NotFound: If either identity does not exist
        DuplicateRequest: If a pending request already exists for the pair
    """
    if from_user_id == to_user_id:
        raise ValidationError("You cannot send a friend request to yourself")

    if not get_by_id(db, from_user_id) or not get_by_id(db, to_user_id):
        raise NotFound("User not found")

    existing = db.exec(
        select(FriendRequest).where(
            FriendRequest.from_user_id == from_user_id,
            FriendRequest.to_user_id == to_user_id,
            FriendRequest.status == FriendRequestStatus.PENDING,
        )
    ).first()
    if existing:
        raise DuplicateRequest("Friend request already sent")

    request = FriendRequest(from_user_id=from_user_id, to_user_id=to_user_id)
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("Friend request %s sent from %s to %s", request.id, from_user_id, to_user_id)

    events.event_bus.publish(events.FRIEND_REQUEST_CREATED, {
        "id": request.id,
        "fromUserId": from_user_id,
        "toUserId": to_user_id,
    })
    return request


def list_pending(db: Session, user_id: str) -> List[Tuple[FriendRequest, User]]:
    """Pending requests addressed to ``user_id``, newest first, with their senders."""
    statement = (
        select(FriendRequest, User)
        .join(User, User.id == FriendRequest.from_user_id)
        .where(
            FriendRequest.to_user_id == user_id,
            FriendRequest.status == FriendRequestStatus.PENDING,
        )
        .order_by(FriendRequest.created_at.desc())
    )
    return list(db.exec(statement).all())


def _add_friend(db: Session, user_id: str, friend_id: str) -> None:
    # Set-union: the composite key already holds the pair
    if db.get(Friendship, (user_id, friend_id)) is None:
        db.add(Friendship(user_id=user_id, friend_id=friend_id))


def respond(db: Session, request_id: str, by_user_id: str, decision) -> FriendRequest:
    """
    Accept or reject a pending request on behalf of its recipient.

    The status change and the friend-set inserts are committed together.

    Raises:
        NotFound: If the request does not exist
        Forbidden: If ``by_user_id`` is not the recipient
        AlreadyHandled: If the request is no longer pending
        ValidationError: If ``decision`` is not accepted/rejected
    """
    request = db.get(FriendRequest, request_id)
    if not request:
        raise NotFound("Friend request not found")
    if request.to_user_id != by_user_id:
        raise Forbidden("Not authorized to act on this request")

    request.status = request.status.transition(decision)
    request.responded_at = now_iso()
    db.add(request)

    if request.status == FriendRequestStatus.ACCEPTED:
        _add_friend(db, request.from_user_id, request.to_user_id)
        _add_friend(db, request.to_user_id, request.from_user_id)

    db.commit()
    db.refresh(request)
    logger.info("Friend request %s %s by %s", request.id, request.status.value, by_user_id)

    if request.status == FriendRequestStatus.ACCEPTED:
        events.event_bus.publish(events.FRIEND_REQUEST_ACCEPTED, {
            "id": request.id,
            "fromUserId": request.from_user_id,
            "toUserId": request.to_user_id,
        })
    return request


def list_friends(db: Session, user_id: str) -> List[User]:
    """Resolved identities in the friend set of ``user_id``."""
    require_user(db, user_id)
    statement = (
        select(User)
        .join(Friendship, Friendship.friend_id == User.id)
        .where(Friendship.user_id == user_id)
        .order_by(Friendship.created_at)
    )
    return list(db.exec(statement).all())


def are_friends(db: Session, user_id: str, other_id: str) -> bool:
    return db.get(Friendship, (user_id, other_id)) is not None


def list_accepted_counterparts(db: Session, user_id: str) -> List[User]:
    """The other identity of every accepted request involving ``user_id``."""
    requests = db.exec(
        select(FriendRequest)
        .where(
            or_(FriendRequest.from_user_id == user_id, FriendRequest.to_user_id == user_id),
            FriendRequest.status == FriendRequestStatus.ACCEPTED,
        )
        .order_by(FriendRequest.created_at)
    ).all()

    friends = []
    seen = set()
    for request in requests:
        other_id = request.to_user_id if request.from_user_id == user_id else request.from_user_id
        if other_id in seen:
            continue
        seen.add(other_id)
        other = get_by_id(db, other_id)
        if other:
            friends.append(other)
    return friends
