import pytest

from prodigy.core import events
from prodigy.core.errors import Forbidden, NotFound, ValidationError
from prodigy.services import friendships, messages


@pytest.fixture
def friends(db, make_user):
    a, b = make_user(), make_user()
    request = friendships.send_request(db, a.id, b.id)
    friendships.respond(db, request.id, b.id, "accepted")
    return a, b


def test_messages_require_friendship(db, make_user):
    a, b = make_user(), make_user()
    with pytest.raises(Forbidden):
        messages.send(db, a.id, b.id, "hi")
    with pytest.raises(NotFound):
        messages.send(db, a.id, "missing", "hi")


def test_empty_message_is_rejected(db, friends):
    a, b = friends
    with pytest.raises(ValidationError):
        messages.send(db, a.id, b.id, "   ")


def test_conversation_is_chronological_in_both_directions(db, friends, make_user):
    a, b = friends
    c = make_user()
    first = messages.send(db, a.id, b.id, "hello")
    second = messages.send(db, b.id, a.id, "hey")

    assert [m.id for m in messages.conversation(db, a.id, b.id)] == [first.id, second.id]
    assert [m.id for m in messages.conversation(db, b.id, a.id)] == [first.id, second.id]
    assert messages.conversation(db, a.id, c.id) == []


def test_send_publishes_message_event(db, friends):
    a, b = friends
    received = []
    events.event_bus.subscribe(events.MESSAGE_CREATED, received.append)

    message = messages.send(db, a.id, b.id, "ping")

    assert received == [{
        "id": message.id,
        "fromUserId": a.id,
        "toUserId": b.id,
        "content": "ping",
        "timestamp": message.timestamp,
    }]


def test_failing_subscriber_does_not_break_send(db, friends):
    a, b = friends

    def broken(payload):
        raise RuntimeError("socket closed")

    events.event_bus.subscribe(events.MESSAGE_CREATED, broken)

    message = messages.send(db, a.id, b.id, "still delivered")

    assert messages.conversation(db, a.id, b.id)[0].id == message.id
