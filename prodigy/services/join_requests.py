"""
Join-request workflow.

Per (group, user) pair a request moves pending -> accepted | rejected. The owner's
own record is created already accepted. Accepting adds the user to the group's
members in the same transaction as the status change.
"""
import logging
from typing import List, Optional

from sqlmodel import Session, select

from prodigy.core import events
from prodigy.core.errors import DuplicateRequest, Forbidden, NotFound, ValidationError
from prodigy.models.common import now_iso
from prodigy.models.group import Group
from prodigy.models.join_request import JoinRequest, JoinRequestStatus
from prodigy.services import groups
from prodigy.services.identity import require_user

logger = logging.getLogger(__name__)


def create_accepted(db: Session, user_id: str, group_id: str) -> JoinRequest:
    """Stage the owner's join request, accepted from the start."""
    request = JoinRequest(
        user_id=user_id,
        group_id=group_id,
        status=JoinRequestStatus.ACCEPTED,
        responded_at=now_iso(),
    )
    db.add(request)
    return request


def stage_pending(db: Session, user_id: str, group_id: str, invited_by: Optional[str] = None) -> JoinRequest:
    """Stage a pending join request without committing; ``invited_by`` marks an invitation."""
    request = JoinRequest(user_id=user_id, group_id=group_id, invited_by=invited_by)
    db.add(request)
    return request


def announce(user_id: str, group: Group) -> None:
    events.event_bus.publish(events.JOIN_REQUEST_CREATED, {
        "userId": user_id,
        "groupId": group.id,
        "groupName": group.name,
    })


def _pending_for(db: Session, user_id: str, group_id: str) -> Optional[JoinRequest]:
    return db.exec(
        select(JoinRequest).where(
            JoinRequest.user_id == user_id,
            JoinRequest.group_id == group_id,
            JoinRequest.status == JoinRequestStatus.PENDING,
        )
    ).first()


def create_pending(db: Session, user_id: str, group_id: str) -> JoinRequest:
    """
    Create a self-initiated request from ``user_id`` to join ``group_id``.

    Raises:
        NotFound: If the user or group does not exist
        Forbidden: If the group is private (private groups are invitation only)
        ValidationError: If the user already is a member
        DuplicateRequest: If a pending request already exists for the pair
    """
    require_user(db, user_id)
    group = groups.require_group(db, group_id)
    if groups.is_member(db, group, user_id):
        raise ValidationError("Already a member of this group")
    if group.is_private:
        raise Forbidden("This group is private")
    if _pending_for(db, user_id, group_id):
        raise DuplicateRequest("Join request already sent")

    request = stage_pending(db, user_id, group_id)
    db.commit()
    db.refresh(request)
    logger.info("Join request %s created for user %s to group %s", request.id, user_id, group_id)
    announce(user_id, group)
    return request


def get_by_id(db: Session, request_id: str) -> Optional[JoinRequest]:
    return db.get(JoinRequest, request_id)


def list_for_owner(db: Session, owner_id: str, status: Optional[JoinRequestStatus] = None) -> List[JoinRequest]:
    """Join requests of any status (or ``status``) for groups owned by ``owner_id``."""
    owned = select(Group.id).where(Group.owner_id == owner_id)
    statement = select(JoinRequest).where(JoinRequest.group_id.in_(owned))
    if status is not None:
        statement = statement.where(JoinRequest.status == status)
    return list(db.exec(statement.order_by(JoinRequest.requested_at)).all())


def list_for_user(db: Session, user_id: str) -> List[JoinRequest]:
    """Pending requests addressed to ``user_id``."""
    statement = (
        select(JoinRequest)
        .where(
            JoinRequest.user_id == user_id,
            JoinRequest.status == JoinRequestStatus.PENDING,
        )
        .order_by(JoinRequest.requested_at)
    )
    return list(db.exec(statement).all())


def respond(db: Session, request_id: str, decision, by_user_id: Optional[str] = None) -> JoinRequest:
    """
    Accept or reject a pending join request.

    When ``by_user_id`` is given it must be the counterparty of the request: the
    invitee for an invitation, the group owner for a self-initiated request.
    Accepting adds the user to the group (set semantics) in the same commit as
    the status change; rejecting leaves the group untouched.

    Raises:
        NotFound: If the request or its group does not exist
        Forbidden: If ``by_user_id`` may not decide on this request
        AlreadyHandled: If the request is no longer pending
        ValidationError: If ``decision`` is not accepted/rejected
    """
    request = get_by_id(db, request_id)
    if not request:
        raise NotFound("Join request not found")

    group = groups.require_group(db, request.group_id)
    decider = request.user_id if request.invited_by else group.owner_id
    if by_user_id is not None and by_user_id != decider:
        raise Forbidden("Not authorized to act on this join request")

    request.status = request.status.transition(decision)
    request.responded_at = now_iso()
    db.add(request)

    if request.status == JoinRequestStatus.ACCEPTED:
        groups.add_member(db, group.id, request.user_id)

    db.commit()
    db.refresh(request)
    logger.info("Join request %s %s", request.id, request.status.value)
    return request
