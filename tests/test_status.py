import pytest

from prodigy.core.errors import AlreadyHandled, ValidationError
from prodigy.models import FriendRequestStatus, JoinRequestStatus


@pytest.mark.parametrize("status_cls", [FriendRequestStatus, JoinRequestStatus])
def test_pending_moves_to_terminal_states(status_cls):
    assert status_cls.PENDING.transition("accepted") is status_cls.ACCEPTED
    assert status_cls.PENDING.transition(status_cls.REJECTED) is status_cls.REJECTED


@pytest.mark.parametrize("status_cls", [FriendRequestStatus, JoinRequestStatus])
def test_terminal_states_are_final(status_cls):
    for terminal in (status_cls.ACCEPTED, status_cls.REJECTED):
        with pytest.raises(AlreadyHandled):
            terminal.transition("accepted")
        with pytest.raises(AlreadyHandled):
            terminal.transition("rejected")


def test_pending_cannot_move_to_pending_or_unknown():
    with pytest.raises(ValidationError):
        FriendRequestStatus.PENDING.transition("pending")
    with pytest.raises(ValidationError):
        JoinRequestStatus.PENDING.transition("maybe")


def test_status_values_serialize_as_strings():
    assert FriendRequestStatus.ACCEPTED == "accepted"
    assert JoinRequestStatus.PENDING.is_pending
    assert not JoinRequestStatus.REJECTED.is_pending
