from pydantic import Field

from prodigy.schemas.base import CamelModel


class MessageCreate(CamelModel):
    to_user_id: str
    content: str = Field(min_length=1)


class MessageRead(CamelModel):
    id: str
    from_user_id: str
    to_user_id: str
    content: str
    timestamp: str
