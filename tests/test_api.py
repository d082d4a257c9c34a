import os
from datetime import datetime, timedelta, timezone

from jose import jwt

from prodigy.core.config import settings
from prodigy.core.security import create_access_token

API = "/api/v1"


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_register_and_login(client):
    response = client.post(f"{API}/register", json={
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "Ada@Example.com",
        "password": "engine",
    })
    assert response.status_code == 201
    register_id = response.json()["registerId"]
    assert register_id.startswith("REG")

    response = client.post(f"{API}/login", json={"email": "ada@example.com", "password": "engine"})
    assert response.status_code == 200
    body = response.json()
    assert body["registerId"] == register_id
    assert body["user"]["email"] == "ada@example.com"
    assert body["tokenType"] == "bearer"
    assert "password" not in body["user"]
    assert "httponly" in response.headers["set-cookie"].lower()


def test_register_rejects_duplicate_email_and_bad_body(client):
    payload = {"firstName": "A", "lastName": "B", "email": "dup@example.com", "password": "pw"}
    assert client.post(f"{API}/register", json=payload).status_code == 201

    response = client.post(f"{API}/register", json=payload)
    assert response.status_code == 400
    assert response.json() == {"message": "User already exists"}

    response = client.post(f"{API}/register", json={"email": "not-an-email"})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request data"


def test_login_failures(client, signup):
    signup("Grace")
    response = client.post(f"{API}/login", json={"email": "nobody@example.com", "password": "x"})
    assert response.status_code == 404
    response = client.post(f"{API}/login", json={"email": "grace1@example.com", "password": "wrong"})
    assert response.status_code == 401
    assert "message" in response.json()


def test_authentication_required(client):
    response = client.get(f"{API}/users/me")
    assert response.status_code == 401
    assert "message" in response.json()

    response = client.get(f"{API}/users/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


def test_session_cookie_authenticates(client, signup):
    user_id, headers = signup("Linus")
    token = headers["Authorization"].split(" ", 1)[1]

    client.cookies.set("access_token", f"Bearer {token}")
    response = client.get(f"{API}/users/me")

    assert response.status_code == 200
    assert response.json()["id"] == user_id


def test_profile_update_and_search(client, signup):
    user_id, headers = signup("Barbara")

    response = client.put(f"{API}/users/me", headers=headers, json={
        "firstName": "Barbara",
        "lastName": "Liskov",
        "email": "barbara@example.com",
        "bio": "Substitution",
    })
    assert response.status_code == 200
    me = response.json()
    assert me["lastName"] == "Liskov"
    assert me["bio"] == "Substitution"

    response = client.get(f"{API}/users/search", params={"registerId": me["registerId"]})
    assert response.status_code == 200
    assert response.json()["fullName"] == "Barbara Liskov"

    assert client.get(f"{API}/users/search", params={"registerId": "REG000000"}).status_code == 404
    assert client.get(f"{API}/users/search").status_code == 400


def test_avatar_upload(client, signup):
    _, headers = signup("Alan")

    response = client.post(
        f"{API}/users/me/avatar",
        headers=headers,
        files={"file": ("me.png", b"\x89PNG fake", "image/png")},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["avatarUrl"].startswith("/uploads/avatars/")
    assert body["user"]["avatar"] == body["avatarUrl"]

    response = client.post(
        f"{API}/users/me/avatar",
        headers=headers,
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_friendship_group_and_task_flow(client, signup):
    alice, alice_h = signup("Alice")
    bob, bob_h = signup("Bob")

    # Friend request and acceptance
    response = client.post(f"{API}/friend-requests", headers=alice_h, json={"toUserId": bob})
    assert response.status_code == 200
    request_id = response.json()["id"]
    assert client.post(f"{API}/friend-requests", headers=alice_h, json={"toUserId": bob}).status_code == 400

    pending = client.get(f"{API}/friend-requests/pending", headers=bob_h).json()
    assert [p["fromUser"]["id"] for p in pending] == [alice]

    assert client.patch(f"{API}/friend-requests/{request_id}", headers=alice_h,
                        json={"status": "accepted"}).status_code == 403
    response = client.patch(f"{API}/friend-requests/{request_id}", headers=bob_h, json={"status": "accepted"})
    assert response.json() == {"message": "Friend request accepted"}
    response = client.patch(f"{API}/friend-requests/{request_id}", headers=bob_h, json={"status": "rejected"})
    assert response.status_code == 400

    assert [u["id"] for u in client.get(f"{API}/users/friends", headers=alice_h).json()] == [bob]
    assert [u["id"] for u in client.get(f"{API}/friend-requests/accepted/{bob}").json()] == [alice]

    # Group with a proposed member
    response = client.post(f"{API}/groups", headers=alice_h, json={"name": "Eng", "members": [bob]})
    assert response.status_code == 200
    group = response.json()
    assert group["ownerId"] == alice
    assert group["members"] == [alice]

    invitations = client.get(f"{API}/join-requests/user/{bob}", headers=bob_h).json()
    assert len(invitations) == 1
    assert invitations[0]["group"]["name"] == "Eng"
    response = client.patch(f"{API}/join-requests/{invitations[0]['id']}", headers=bob_h,
                            json={"status": "accepted"})
    assert response.json() == {"message": "Join request accepted"}

    group = client.get(f"{API}/groups/{group['id']}", headers=alice_h).json()
    assert group["members"] == [alice, bob]

    # Team task visible to the group, mutable only by its owner
    response = client.post(f"{API}/tasks", headers=bob_h, json={"title": "Ship", "groupId": group["id"]})
    assert response.status_code == 200
    task = response.json()

    listed = client.get(f"{API}/tasks/group/{group['id']}", headers=alice_h).json()
    assert [(t["id"], t["owner"]["id"]) for t in listed] == [(task["id"], bob)]
    assert client.patch(f"{API}/tasks/{task['id']}/complete", headers=alice_h).status_code == 403
    response = client.patch(f"{API}/tasks/{task['id']}/complete", headers=bob_h)
    assert response.json()["status"] == "completed"

    assert [t["id"] for t in client.get(f"{API}/tasks/user/{bob}/team", headers=bob_h).json()] == [task["id"]]
    assert client.get(f"{API}/tasks/user/{bob}/personal", headers=bob_h).json() == []

    # Messages between friends
    response = client.post(f"{API}/messages", headers=alice_h, json={"toUserId": bob, "content": "Nice work"})
    assert response.status_code == 200
    conversation = client.get(f"{API}/messages/{alice}", headers=bob_h).json()
    assert [m["content"] for m in conversation] == ["Nice work"]


def test_listings_are_limited_to_the_caller(client, signup):
    alice, alice_h = signup("Alice")
    bob, _ = signup("Bob")

    for path in (f"/tasks/user/{bob}", f"/groups/user/{bob}", f"/join-requests/user/{bob}",
                 f"/join-requests/owner/{bob}"):
        response = client.get(f"{API}{path}", headers=alice_h)
        assert response.status_code == 403, path
        assert "message" in response.json()


def test_tasks_for_others_and_strangers_messages(client, signup):
    alice, alice_h = signup("Alice")
    bob, _ = signup("Bob")

    response = client.post(f"{API}/tasks", headers=alice_h, json={"title": "Yours", "userId": bob})
    assert response.status_code == 403
    assert response.json() == {"message": "Access denied. You can only create tasks for yourself."}

    response = client.post(f"{API}/messages", headers=alice_h, json={"toUserId": bob, "content": "hi"})
    assert response.status_code == 403


def test_unknown_records_return_404(client, signup):
    _, headers = signup("Eve")
    assert client.get(f"{API}/groups/missing", headers=headers).status_code == 404
    assert client.get(f"{API}/tasks/missing", headers=headers).status_code == 404
    assert client.patch(f"{API}/join-requests/missing", headers=headers,
                        json={"status": "accepted"}).status_code == 404
    assert client.get(f"{API}/users/missing", headers=headers).json() == {"message": "User not found"}


def test_expired_token_is_rejected(client, signup):
    user_id, _ = signup("Ken")
    token = create_access_token(user_id, expires_delta=timedelta(seconds=-1))

    response = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert "message" in response.json()


def test_session_token_lasts_configured_lifetime(client, signup):
    user_id, headers = signup("Dennis")
    token = headers["Authorization"].split(" ", 1)[1]

    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])

    assert claims["sub"] == user_id
    lifetime = claims["exp"] - datetime.now(timezone.utc).timestamp()
    assert abs(lifetime - settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60) < 60
    assert settings.ACCESS_TOKEN_EXPIRE_MINUTES == 7 * 24 * 60


def test_new_avatar_replaces_stored_file(client, signup):
    _, headers = signup("Ada")
    avatar_dir = os.path.join(settings.UPLOAD_DIR, "avatars")

    first = client.post(f"{API}/users/me/avatar", headers=headers,
                        files={"file": ("a.png", b"first", "image/png")}).json()
    second = client.post(f"{API}/users/me/avatar", headers=headers,
                         files={"file": ("b.png", b"second", "image/png")}).json()

    assert os.listdir(avatar_dir) == [os.path.basename(second["avatarUrl"])]
    assert first["avatarUrl"] != second["avatarUrl"]


def test_join_requests_are_decided_by_the_other_party(client, signup):
    owner, owner_h = signup("Olga")
    applicant, applicant_h = signup("Pavel")
    group = client.post(f"{API}/groups", headers=owner_h, json={"name": "Open"}).json()

    request = client.post(f"{API}/join-requests", headers=applicant_h, json={"groupId": group["id"]}).json()
    assert request["invitedBy"] is None

    response = client.patch(f"{API}/join-requests/{request['id']}", headers=applicant_h,
                            json={"status": "accepted"})
    assert response.status_code == 403
    response = client.patch(f"{API}/join-requests/{request['id']}", headers=owner_h,
                            json={"status": "accepted"})
    assert response.json() == {"message": "Join request accepted"}
    group = client.get(f"{API}/groups/{group['id']}", headers=owner_h).json()
    assert group["members"] == [owner, applicant]


def test_private_group_hidden_from_non_members(client, signup):
    _, owner_h = signup("Olga")
    _, other_h = signup("Ivan")
    group = client.post(f"{API}/groups", headers=owner_h, json={"name": "Secret", "isPrivate": True}).json()

    assert client.get(f"{API}/groups/{group['id']}", headers=other_h).status_code == 403
    assert client.get(f"{API}/groups/{group['id']}/members", headers=other_h).status_code == 403
    assert client.get(f"{API}/groups/{group['id']}/members", headers=owner_h).status_code == 200
