import os
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("RATE_LIMIT", "10000/minute")

from videohub.backend import BackendService  # noqa: E402
from videohub.errors import NoSuchUser, UserAlreadyExists, WrongPassword  # noqa: E402
from videohub.main import app  # noqa: E402


@pytest.fixture
def client():
    app.state.backend = BackendService()
    return TestClient(app)


def test_signup_login(client: TestClient):
    r = client.post("/api/auth/signup", json={"username": "u1", "password": "pass"})
    assert r.status_code == 201

    r = client.post("/api/auth/login", json={"username": "u1", "password": "pass"})
    assert r.status_code == 200
    body = r.json()
    assert body["token_type"] == "bearer"
    assert len(body["access_token"]) == 7


def test_signup_twice_conflicts(client: TestClient):
    client.post("/api/auth/signup", json={"username": "u1", "password": "pass"})
    r = client.post("/api/auth/signup", json={"username": "u1", "password": "other"})
    assert r.status_code == 409
    assert r.json()["error"] == "UserAlreadyExists"


def test_login_failures(client: TestClient):
    client.post("/api/auth/signup", json={"username": "u1", "password": "pass"})

    r = client.post("/api/auth/login", json={"username": "u1", "password": "nope"})
    assert r.status_code == 401
    assert r.json()["error"] == "WrongPassword"

    r = client.post("/api/auth/login", json={"username": "ghost", "password": "pass"})
    assert r.status_code == 404
    assert r.json()["error"] == "NoSuchUser"


def test_signup_rejects_name_with_spaces(client: TestClient):
    r = client.post("/api/auth/signup", json={"username": "two words", "password": "pass"})
    assert r.status_code == 422


def test_register_then_auth():
    backend = BackendService()
    backend.register_user("alice", "secret")
    token = backend.auth("alice", "secret")
    assert token
    assert backend.context.sessions.resolve(token).name == "alice"

    with pytest.raises(UserAlreadyExists):
        backend.register_user("alice", "again")
    with pytest.raises(WrongPassword):
        backend.auth("alice", "Secret")
    with pytest.raises(NoSuchUser):
        backend.auth("bob", "secret")


@pytest.mark.parametrize("name,password", [("a", "p"), ("bob", ""), ("carol", "with space")])
def test_registered_user_can_always_authenticate(name, password):
    backend = BackendService()
    backend.register_user(name, password)
    assert backend.auth(name, password)


def test_login_again_keeps_earlier_tokens():
    backend = BackendService()
    backend.register_user("alice", "secret")
    first = backend.auth("alice", "secret")
    second = backend.auth("alice", "secret")
    assert first != second
    sessions = backend.context.sessions
    assert sessions.resolve(first) is sessions.resolve(second)
    assert len(sessions) == 2
