"""
Shared model helpers.

``RequestStatus`` is the lifecycle shared by friend requests and join requests:
a record is created ``pending`` and moves exactly once to ``accepted`` or
``rejected``. Both terminal states are final.
"""
from datetime import datetime, timezone
from enum import Enum

from prodigy.core.errors import AlreadyHandled, ValidationError


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string (the storage format for timestamps)."""
    return datetime.now(timezone.utc).isoformat()


class RequestStatus(str, Enum):
    """
    Base enumeration for pending/accepted/rejected lifecycles.

    Subclasses declare the members; this base only carries the transition rule.
    """

    @property
    def is_pending(self) -> bool:
        return self.value == "pending"

    def transition(self, target) -> "RequestStatus":
        """
        Return the state reached by moving from this state to ``target``.

        Raises:
            AlreadyHandled: If this state is terminal
            ValidationError: If ``target`` is not a terminal state of this lifecycle
        """
        try:
            target = type(self)(target)
        except ValueError:
            raise ValidationError("Invalid status")
        if not self.is_pending:
            raise AlreadyHandled("Request already handled")
        if target.is_pending:
            raise ValidationError("Invalid status")
        return target
