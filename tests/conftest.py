import os

# Must be set before the application settings are imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

import prodigy.models  # noqa: F401
from prodigy.core.config import settings
from prodigy.core.events import event_bus
from prodigy.db.session import engine
from prodigy.main import app
from prodigy.services import identity


@pytest.fixture(autouse=True)
def reset_database():
    SQLModel.metadata.create_all(engine)
    yield
    SQLModel.metadata.drop_all(engine)
    event_bus.clear()


@pytest.fixture
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(db):
    """Register users directly through the identity service."""
    counter = {"n": 0}

    def _make_user(first_name="Test", last_name="User", email=None, password="secret123"):
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        return identity.register(db, first_name, last_name, email, password)

    return _make_user


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    return TestClient(app)


@pytest.fixture
def signup(client):
    """Register and log in through the API; returns (user_id, auth headers)."""
    counter = {"n": 0}

    def _signup(first_name="Api", last_name="User", password="secret123"):
        counter["n"] += 1
        email = f"{first_name.lower()}{counter['n']}@example.com"
        response = client.post("/api/v1/register", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        })
        assert response.status_code == 201, response.text
        response = client.post("/api/v1/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        body = response.json()
        client.cookies.clear()
        return body["user"]["id"], {"Authorization": f"Bearer {body['accessToken']}"}

    return _signup
