from sqlmodel import SQLModel, Field
import uuid

from prodigy.models.common import now_iso


class Message(SQLModel, table=True):
    """A direct message between two friends."""
    __tablename__ = "messages"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    from_user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    to_user_id: str = Field(foreign_key="users.id", index=True, nullable=False)
    content: str = Field(nullable=False)
    timestamp: str = Field(default_factory=now_iso)
