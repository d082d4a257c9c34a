from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase JSON."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Decision(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class DecisionUpdate(CamelModel):
    status: Decision


class StatusMessage(CamelModel):
    message: str
