import os
import tempfile

import pytest
from fastapi.testclient import TestClient


# Ensure settings are in place before the app (and security/config modules) are imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SEED_DEV_USERS"] = "0"
os.environ["IPQS_API_KEY"] = ""
os.environ["USERS_FILE"] = os.path.join(
    tempfile.gettempdir(), f"credlocker-test-users-{os.getpid()}.json"
)

from credlocker.auth.store import UserStore  # noqa: E402
from credlocker.main import create_app  # noqa: E402
from credlocker.reputation.client import ReputationClient  # noqa: E402


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if self.text is not None:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    """Stands in for requests.Session: records calls, replays canned replies."""

    def __init__(self, payload=None, exc=None, text=None):
        self.payload = payload if payload is not None else {"success": True}
        self.exc = exc
        self.text = text
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return FakeResponse(self.payload, text=self.text)


@pytest.fixture
def users_file(tmp_path):
    return tmp_path / "data" / "users.json"


@pytest.fixture
def store(users_file):
    return UserStore(users_file)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def app(store, fake_session):
    reputation = ReputationClient(api_key="test-ipqs-key-123456", session=fake_session)
    return create_app(store=store, reputation=reputation, enable_debug_routes=True)


@pytest.fixture
def client(app):
    return TestClient(app)


def signup(client, username="alice", email=None, password="secret123", full_name="Alice Example"):
    return client.post(
        "/auth/signup",
        data={
            "fullName": full_name,
            "email": email or f"{username}@example.com",
            "username": username,
            "password": password,
            "confirmPassword": password,
        },
    )


def login(client, username="alice", password="secret123"):
    return client.post("/auth/login", data={"username": username, "password": password})


@pytest.fixture
def logged_in(client):
    assert signup(client).status_code == 201
    assert login(client).status_code == 200
    return client
