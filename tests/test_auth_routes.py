from fastapi.testclient import TestClient

from conftest import login, signup
from credlocker.auth.store import UserStore
from credlocker.main import create_app
from credlocker.reputation.client import ReputationClient


def test_signup_returns_user_without_password(client):
    resp = signup(client)

    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["username"] == "alice"
    assert user["fullName"] == "Alice Example"
    assert "passwordHash" not in user and "password" not in user


def test_signup_conflict(client):
    assert signup(client).status_code == 201

    same_username = signup(client, username="alice", email="new@example.com")
    same_email = signup(client, username="bob", email="alice@example.com")

    assert same_username.status_code == 409
    assert same_email.status_code == 409
    assert same_username.json()["detail"] == "Username or email already exists"


def test_signup_validation(client, store):
    missing = client.post("/auth/signup", data={"username": "alice", "password": "secret123"})
    mismatch = client.post(
        "/auth/signup",
        data={
            "fullName": "Alice", "email": "a@example.com", "username": "alice",
            "password": "secret123", "confirmPassword": "secret124",
        },
    )
    short = signup(client, password="abc")

    assert missing.status_code == 400
    assert missing.json()["detail"] == "All fields are required"
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match"
    assert short.status_code == 400
    assert "at least 6" in short.json()["detail"]
    assert len(store) == 0


def test_login_sets_cookie_and_profile_works(client):
    signup(client)

    resp = login(client)

    assert resp.status_code == 200
    assert "access_token" in resp.cookies
    profile = client.get("/profile")
    assert profile.status_code == 200
    assert profile.json()["username"] == "alice"
    assert "passwordHash" not in profile.json()


def test_login_bad_credentials(client):
    signup(client)

    wrong_password = login(client, password="nope-nope")
    unknown_user = login(client, username="nobody")

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert "application/json" in wrong_password.headers.get("content-type", "")


def test_bearer_header_is_accepted(client):
    signup(client)
    token = login(client).json()["access_token"]
    client.cookies.clear()

    resp = client.get("/profile", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200


def test_protected_routes_require_login(client):
    assert client.get("/profile").status_code == 401
    assert client.get("/api/leaderboard").status_code == 401
    client.cookies.set("access_token", "garbage")
    assert client.get("/profile").status_code == 401


def test_logout_clears_cookie(logged_in):
    assert logged_in.post("/auth/logout").status_code == 200
    logged_in.cookies.clear()
    assert logged_in.get("/profile").status_code == 401


def test_user_listing_is_admin_only(users_file, fake_session):
    seeded = UserStore(users_file, seed_dev_users=True)
    client = TestClient(create_app(store=seeded, reputation=ReputationClient(session=fake_session)))

    login(client, username="user", password="password")
    assert client.get("/api/users").status_code == 403

    client.cookies.clear()
    login(client, username="admin", password="password")
    resp = client.get("/api/users")

    assert resp.status_code == 200
    users = resp.json()["users"]
    assert [(u["username"], u["role"]) for u in users] == [("admin", "admin"), ("user", "user")]
    assert all("passwordHash" not in u for u in users)


def test_login_trims_username_like_signup(client, store):
    assert signup(client, username=" bob ", email="bob@example.com").status_code == 201
    assert store.find_by_username("bob") is not None

    assert login(client, username=" bob ").status_code == 200
    assert login(client, username="bob").status_code == 200
