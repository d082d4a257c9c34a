import pytest

from prodigy.core import events
from prodigy.core.errors import AlreadyHandled, DuplicateRequest, Forbidden, NotFound, ValidationError
from prodigy.models import FriendRequestStatus
from prodigy.services import friendships


def test_second_pending_request_is_a_duplicate(db, make_user):
    a, b = make_user(), make_user()
    friendships.send_request(db, a.id, b.id)

    with pytest.raises(DuplicateRequest):
        friendships.send_request(db, a.id, b.id)


def test_new_request_allowed_after_previous_was_handled(db, make_user):
    a, b = make_user(), make_user()
    first = friendships.send_request(db, a.id, b.id)
    friendships.respond(db, first.id, b.id, "rejected")

    second = friendships.send_request(db, a.id, b.id)

    assert second.id != first.id
    assert second.status == FriendRequestStatus.PENDING


def test_reverse_direction_is_a_separate_pair(db, make_user):
    a, b = make_user(), make_user()
    friendships.send_request(db, a.id, b.id)
    reverse = friendships.send_request(db, b.id, a.id)
    assert reverse.status == FriendRequestStatus.PENDING


def test_send_request_validates_identities(db, make_user):
    a = make_user()
    with pytest.raises(NotFound):
        friendships.send_request(db, a.id, "missing")
    with pytest.raises(ValidationError):
        friendships.send_request(db, a.id, a.id)


def test_accept_makes_friendship_symmetric_and_is_not_repeatable(db, make_user):
    a, b = make_user(), make_user()
    request = friendships.send_request(db, a.id, b.id)

    friendships.respond(db, request.id, b.id, "accepted")
    with pytest.raises(AlreadyHandled):
        friendships.respond(db, request.id, b.id, "accepted")

    assert [u.id for u in friendships.list_friends(db, a.id)] == [b.id]
    assert [u.id for u in friendships.list_friends(db, b.id)] == [a.id]


def test_friend_set_stays_unique_across_two_accepted_requests(db, make_user):
    a, b = make_user(), make_user()
    first = friendships.send_request(db, a.id, b.id)
    second = friendships.send_request(db, b.id, a.id)

    friendships.respond(db, first.id, b.id, "accepted")
    friendships.respond(db, second.id, a.id, "accepted")

    assert [u.id for u in friendships.list_friends(db, a.id)] == [b.id]
    assert [u.id for u in friendships.list_friends(db, b.id)] == [a.id]


def test_reject_does_not_create_friendship(db, make_user):
    a, b = make_user(), make_user()
    request = friendships.send_request(db, a.id, b.id)

    handled = friendships.respond(db, request.id, b.id, "rejected")

    assert handled.status == FriendRequestStatus.REJECTED
    assert friendships.list_friends(db, a.id) == []


def test_only_recipient_may_respond(db, make_user):
    a, b, c = make_user(), make_user(), make_user()
    request = friendships.send_request(db, a.id, b.id)

    with pytest.raises(Forbidden):
        friendships.respond(db, request.id, a.id, "accepted")
    with pytest.raises(Forbidden):
        friendships.respond(db, request.id, c.id, "accepted")
    with pytest.raises(NotFound):
        friendships.respond(db, "missing", b.id, "accepted")


def test_list_pending_returns_senders_for_recipient_only(db, make_user):
    a, b, c = make_user(first_name="Ann"), make_user(), make_user(first_name="Cid")
    friendships.send_request(db, a.id, b.id)
    handled = friendships.send_request(db, c.id, b.id)
    friendships.respond(db, handled.id, b.id, "accepted")
    friendships.send_request(db, b.id, c.id)

    pending = friendships.list_pending(db, b.id)

    assert len(pending) == 1
    request, sender = pending[0]
    assert request.from_user_id == a.id
    assert sender.first_name == "Ann"


def test_accepted_counterparts(db, make_user):
    a, b, c = make_user(), make_user(), make_user()
    for sender in (b, c):
        request = friendships.send_request(db, sender.id, a.id)
        friendships.respond(db, request.id, a.id, "accepted")

    assert [u.id for u in friendships.list_accepted_counterparts(db, a.id)] == [b.id, c.id]
    assert [u.id for u in friendships.list_accepted_counterparts(db, b.id)] == [a.id]


def test_request_created_event_is_published(db, make_user):
    received = []
    events.event_bus.subscribe(events.FRIEND_REQUEST_CREATED, received.append)
    a, b = make_user(), make_user()

    request = friendships.send_request(db, a.id, b.id)

    assert received == [{"id": request.id, "fromUserId": a.id, "toUserId": b.id}]
