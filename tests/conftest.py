"""
Shared fixtures: a local SQLite record store, a scripted identity provider,
and the server app wired to an in-memory database.
"""

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from securepass.client.identity import Identity, IdentityProvider, IdentityState
from securepass.client.session import VaultSession
from securepass.client.store import LocalRecordStore
from securepass.server.config import settings
from securepass.server.database import get_session, init_db
from securepass.server.main import app
from securepass.server.routers.auth import get_reset_delivery


class ScriptedIdentityProvider(IdentityProvider):
    """Identity provider driven by the test instead of a server."""

    def set_loading(self):
        self._publish(IdentityState.loading())

    def sign_in_as(self, uid: str, email: str | None = None):
        identity = Identity(uid=uid, email=email or f"{uid}@example.com")
        self._publish(IdentityState.signed_in(identity))

    def sign_out(self):
        self._publish(IdentityState.absent())


@pytest.fixture
def store(tmp_path):
    store = LocalRecordStore(tmp_path / "vault.db")
    yield store
    store.dispose()


@pytest.fixture
def provider():
    return ScriptedIdentityProvider()


@pytest.fixture
def session(provider):
    session = VaultSession(provider).open()
    yield session
    session.close()


@pytest.fixture
def signed_in(provider, session):
    provider.sign_in_as("owner-1", "alice@example.com")
    return session


@pytest.fixture
def client(monkeypatch):
    """TestClient over a fresh in-memory database."""
    # keep hashing fast in tests
    monkeypatch.setattr(settings, "PASSWORD_HASH_ITERATIONS", 1000)

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)

    def override_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


def register_and_login(client: TestClient, email: str = "alice@example.com", password: str = "hunter22") -> dict:
    resp = client.post("/auth/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    uid = resp.json()["uid"]
    resp = client.post("/auth/token", data={"username": email, "password": password})
    assert resp.status_code == 200, resp.text
    token = resp.json()["access_token"]
    return {"uid": uid, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def alice(client):
    return register_and_login(client)


@pytest.fixture
def login(client):
    def _login(email: str, password: str = "hunter22") -> dict:
        return register_and_login(client, email, password)
    return _login


class _ServerBridge:
    """Stands in for ``requests.request``, answering through the TestClient."""

    def __init__(self, client: TestClient):
        self.client = client
        self.calls: list[tuple[str, str]] = []

    def __call__(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append((method, url))
        resp = self.client.request(method, url, headers=headers, **kwargs)
        bridged = requests.Response()
        bridged.status_code = resp.status_code
        bridged._content = resp.content
        bridged.headers.update(resp.headers)
        bridged.encoding = "utf-8"
        bridged.url = url
        return bridged


@pytest.fixture
def server(client, monkeypatch):
    """Route the client's HTTP calls to the in-process server; yields its base URL."""
    bridge = _ServerBridge(client)
    monkeypatch.setattr(requests, "request", bridge)
    return "http://testserver"


@pytest.fixture
def reset_codes(client):
    """Reset codes the server hands to its delivery hook, in issue order."""
    codes: list[str] = []
    app.dependency_overrides[get_reset_delivery] = lambda: lambda user, token: codes.append(token)
    return codes
