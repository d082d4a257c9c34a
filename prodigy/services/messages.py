"""
Direct messages between friends.

Messages are persisted first; real-time delivery is a best-effort publish on the
event bus. A recipient without a live connection reads the message on next fetch.
"""
import logging
from typing import List

from sqlalchemy import and_, or_
from sqlmodel import Session, select

from prodigy.core import events
from prodigy.core.errors import Forbidden, ValidationError
from prodigy.models.message import Message
from prodigy.services.friendships import are_friends
from prodigy.services.identity import require_user

logger = logging.getLogger(__name__)


def send(db: Session, from_user_id: str, to_user_id: str, content: str) -> Message:
    """
    Persist a message and publish ``message.created``.

    Raises:
        ValidationError: If the content is empty
        NotFound: If the recipient does not exist
        Forbidden: If sender and recipient are not friends
    """
    if not content or not content.strip():
        raise ValidationError("Message content is required")
    require_user(db, to_user_id)
    if not are_friends(db, from_user_id, to_user_id):
        raise Forbidden("You can only message your friends")

    message = Message(from_user_id=from_user_id, to_user_id=to_user_id, content=content)
    db.add(message)
    db.commit()
    db.refresh(message)
    logger.info("Message %s sent from %s to %s", message.id, from_user_id, to_user_id)

    events.event_bus.publish(events.MESSAGE_CREATED, {
        "id": message.id,
        "fromUserId": message.from_user_id,
        "toUserId": message.to_user_id,
        "content": message.content,
        "timestamp": message.timestamp,
    })
    return message


def conversation(db: Session, user_id: str, friend_id: str) -> List[Message]:
    """Messages exchanged between the two users, oldest first."""
    statement = (
        select(Message)
        .where(
            or_(
                and_(Message.from_user_id == user_id, Message.to_user_id == friend_id),
                and_(Message.from_user_id == friend_id, Message.to_user_id == user_id),
            )
        )
        .order_by(Message.timestamp)
    )
    return list(db.exec(statement).all())
