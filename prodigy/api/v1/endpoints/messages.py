from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prodigy.api import deps
from prodigy.db.session import get_db
from prodigy.models.user import User
from prodigy.schemas.message import MessageCreate, MessageRead
from prodigy.services import messages

router = APIRouter()


@router.post("", response_model=MessageRead)
def send_message(
    message_in: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    """
    Send a direct message to a friend.

    Raises:
        NotFound (404): If the recipient doesn't exist
        Forbidden (403): If the recipient is not a friend
    """
    return messages.send(db, current_user.id, message_in.to_user_id, message_in.content)


@router.get("/{friend_id}", response_model=List[MessageRead])
def read_conversation(
    friend_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
) -> Any:
    return messages.conversation(db, current_user.id, friend_id)
