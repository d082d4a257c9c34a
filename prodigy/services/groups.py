"""
Group registry: groups, their members and the privacy flag.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from prodigy.core.config import settings
from prodigy.core.errors import Forbidden, NotFound, ValidationError
from prodigy.models.common import now_iso
from prodigy.models.group import Group, GroupMember
from prodigy.models.join_request import JoinRequest
from prodigy.models.task import Task
from prodigy.models.user import User
from prodigy.services import join_requests
from prodigy.services.identity import require_user

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "is_private")


def get_by_id(db: Session, group_id: str) -> Optional[Group]:
    return db.get(Group, group_id)


def require_group(db: Session, group_id: str) -> Group:
    group = get_by_id(db, group_id)
    if not group:
        raise NotFound("Group not found")
    return group


def is_member(db: Session, group: Group, user_id: str) -> bool:
    if group.owner_id == user_id:
        return True
    return db.get(GroupMember, (group.id, user_id)) is not None


def get_visible(db: Session, group_id: str, by_user_id: str) -> Group:
    """
    A group readable by ``by_user_id``: any public group, or a private one they belong to.

    Raises:
        NotFound: If the group does not exist
        Forbidden: If the group is private and the caller is not a member
    """
    group = require_group(db, group_id)
    if group.is_private and not is_member(db, group, by_user_id):
        raise Forbidden("This group is private")
    return group


def add_member(db: Session, group_id: str, user_id: str) -> bool:
    """
    Stage ``user_id`` as a member of ``group_id`` without committing.

    Returns False if the user already was a member.
    """
    if db.get(GroupMember, (group_id, user_id)) is not None:
        return False
    db.add(GroupMember(group_id=group_id, user_id=user_id))
    return True


def member_ids(db: Session, group_id: str) -> List[str]:
    statement = (
        select(GroupMember.user_id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at)
    )
    return list(db.exec(statement).all())


def list_members(db: Session, group_id: str) -> List[User]:
    require_group(db, group_id)
    statement = (
        select(User)
        .join(GroupMember, GroupMember.user_id == User.id)
        .where(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at)
    )
    return list(db.exec(statement).all())


def create_group(
    db: Session,
    owner_id: str,
    name: str,
    description: Optional[str] = None,
    is_private: bool = False,
    proposed_members: Iterable[str] = (),
) -> Group:
    """
    Create a group owned by ``owner_id``.

    The owner becomes the first member and gets an accepted join request. Every
    other proposed member gets a pending join request; duplicates and the owner
    are skipped.

    Raises:
        ValidationError: If the name is empty
        NotFound: If the owner or a proposed member does not exist
    """
    if not name or not name.strip():
        raise ValidationError("Group name is required")

    require_user(db, owner_id)
    invitees = []
    for member_id in proposed_members:
        if member_id == owner_id or member_id in invitees:
            continue
        require_user(db, member_id)
        invitees.append(member_id)

    group = Group(
        name=name.strip(),
        description=description,
        owner_id=owner_id,
        is_private=is_private,
    )
    db.add(group)
    db.flush()

    add_member(db, group.id, owner_id)
    join_requests.create_accepted(db, owner_id, group.id)
    for member_id in invitees:
        join_requests.stage_pending(db, member_id, group.id, invited_by=owner_id)

    db.commit()
    db.refresh(group)
    logger.info("Group %s created by %s with %d invitation(s)", group.id, owner_id, len(invitees))
    for member_id in invitees:
        join_requests.announce(member_id, group)
    return group


def list_for_user(db: Session, user_id: str) -> List[Group]:
    """Groups the user owns or belongs to."""
    member_of = select(GroupMember.group_id).where(GroupMember.user_id == user_id)
    statement = (
        select(Group)
        .where(or_(Group.owner_id == user_id, Group.id.in_(member_of)))
        .order_by(Group.created_at)
    )
    return list(db.exec(statement).all())


def _check_owner(group: Group, by_user_id: str, action: str) -> None:
    if settings.GROUP_MUTATION_REQUIRES_OWNER and group.owner_id != by_user_id:
        raise Forbidden(f"Only the group owner can {action} this group")


def update(db: Session, group_id: str, by_user_id: str, patch: Dict[str, Any]) -> Group:
    """
    Apply ``patch`` (name, description, is_private) to a group.

    Raises:
        NotFound: If the group does not exist
        Forbidden: If owner checks are enabled and the caller is not the owner
        ValidationError: If the patch empties the name
    """
    group = require_group(db, group_id)
    _check_owner(group, by_user_id, "update")

    if "name" in patch and (not patch["name"] or not patch["name"].strip()):
        raise ValidationError("Group name is required")

    for field in _EDITABLE_FIELDS:
        if field in patch and patch[field] is not None:
            setattr(group, field, patch[field])
    group.updated_at = now_iso()

    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Group %s updated by %s", group.id, by_user_id)
    return group


def delete_group(db: Session, group_id: str, by_user_id: str) -> None:
    """
    Delete a group with its memberships and join requests.

    Tasks scoped to the group are kept and become personal tasks of their owners.
    """
    group = require_group(db, group_id)
    _check_owner(group, by_user_id, "delete")

    for task in db.exec(select(Task).where(Task.group_id == group_id)).all():
        task.group_id = None
        task.updated_at = now_iso()
        db.add(task)
    for membership in db.exec(select(GroupMember).where(GroupMember.group_id == group_id)).all():
        db.delete(membership)
    for request in db.exec(select(JoinRequest).where(JoinRequest.group_id == group_id)).all():
        db.delete(request)
    db.delete(group)
    db.commit()
    logger.info("Group %s deleted by %s", group_id, by_user_id)


def add_member_directly(db: Session, group_id: str, by_user_id: str, user_id: str) -> Group:
    """Owner action: make ``user_id`` a member immediately."""
    group = require_group(db, group_id)
    if group.owner_id != by_user_id:
        raise Forbidden("Only the group owner can add members")
    require_user(db, user_id)

    if add_member(db, group_id, user_id):
        db.commit()
        logger.info("User %s added to group %s by owner", user_id, group_id)
    db.refresh(group)
    return group


def remove_member(db: Session, group_id: str, by_user_id: str, user_id: str) -> None:
    """Remove a member; allowed for the owner or for the member leaving."""
    group = require_group(db, group_id)
    if by_user_id not in (group.owner_id, user_id):
        raise Forbidden("Only the group owner can remove other members")
    if user_id == group.owner_id:
        raise ValidationError("The group owner cannot be removed")

    membership = db.get(GroupMember, (group_id, user_id))
    if membership is None:
        raise NotFound("User is not a member of this group")
    db.delete(membership)
    db.commit()
    logger.info("User %s removed from group %s by %s", user_id, group_id, by_user_id)
