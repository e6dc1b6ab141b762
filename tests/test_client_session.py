"""Client session manager tests.

Learn: The backend is replaced by httpx.MockTransport, so these tests
run without a server. Tokens are real (signed with the test secret)
so the manager's local expiry check sees realistic claims.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from voxai.auth.jwt import create_session_token
from voxai.client import (
    ApiError,
    SessionManager,
    SessionState,
    SessionStorage,
    VoxAiClient,
    format_error_message,
)

USER = {"id": "7d3c6f0e-2f7c-4b8e-9d33-0b8c4c1f5a10", "name": "Alice", "email": "a@x.com"}


class FakeBackend:
    """Records requests and answers the routes the client uses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token = create_session_token(USER["id"])
        self.reject_with_401 = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/api/auth/login":
            body = json.loads(request.content)
            if body["email"] != USER["email"]:
                return httpx.Response(400, json={"msg": "User not found", "code": "IdentityNotFound"})
            if body["password"] != "secret1":
                return httpx.Response(400, json={"msg": "Invalid credentials", "code": "InvalidCredential"})
            return httpx.Response(200, json={"token": self.token, "user": USER})
        if path == "/api/auth/register":
            return httpx.Response(200, json={"msg": "User registered successfully"})
        if path == "/api/schemes":
            return httpx.Response(200, json=[])
        if path == "/api/chat":
            if self.reject_with_401 or "x-auth-token" not in request.headers:
                return httpx.Response(401, json={"msg": "Token has expired", "code": "ExpiredToken"})
            return httpx.Response(200, json={"reply": "hi", "topic": "greeting"})
        return httpx.Response(404, json={"msg": "Route not found"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage(tmp_path):
    return SessionStorage(tmp_path / "session.json")


@pytest.fixture
def manager(storage, backend):
    m = SessionManager(storage, base_url="http://test/api", transport=httpx.MockTransport(backend))
    yield m
    m.close()


def _network_calls(backend: FakeBackend) -> int:
    return len(backend.requests)


# ═══════════════════════════════════════════════════════════
# initialize()
# ═══════════════════════════════════════════════════════════


def test_initialize_with_nothing_stored_is_anonymous(manager):
    assert manager.initialize() is SessionState.ANONYMOUS
    assert manager.session is None


def test_initialize_restores_valid_session_without_network(manager, storage, backend):
    token = create_session_token(USER["id"])
    storage.save(token, USER)

    assert manager.initialize() is SessionState.AUTHENTICATED
    assert manager.session.user.name == "Alice"
    assert manager.session.token == token
    assert _network_calls(backend) == 0


def test_initialize_with_expired_token_clears_storage(manager, storage, backend):
    old = datetime.now(timezone.utc) - timedelta(days=8)
    storage.save(create_session_token(USER["id"], issued_at=old), USER)

    assert manager.initialize() is SessionState.ANONYMOUS
    assert storage.load() == {}
    assert not storage.path.exists()
    assert _network_calls(backend) == 0


def test_initialize_at_exact_expiry_second_is_authenticated(storage, backend):
    issued = datetime(2026, 1, 1, tzinfo=timezone.utc)
    storage.save(create_session_token(USER["id"], issued_at=issued), USER)
    expiry = issued + timedelta(days=7)

    m = SessionManager(
        storage,
        base_url="http://test/api",
        transport=httpx.MockTransport(backend),
        clock=lambda: expiry,
    )
    try:
        assert m.initialize() is SessionState.AUTHENTICATED
        assert m.session.expires_at == expiry
    finally:
        m.close()


def test_initialize_one_second_past_expiry_is_anonymous(storage, backend):
    issued = datetime(2026, 1, 1, tzinfo=timezone.utc)
    storage.save(create_session_token(USER["id"], issued_at=issued), USER)

    m = SessionManager(
        storage,
        base_url="http://test/api",
        transport=httpx.MockTransport(backend),
        clock=lambda: issued + timedelta(days=7, seconds=1),
    )
    try:
        assert m.initialize() is SessionState.ANONYMOUS
        assert storage.load() == {}
    finally:
        m.close()


def test_initialize_with_garbage_token_clears_storage(manager, storage):
    storage.save("not-a-token", USER)

    assert manager.initialize() is SessionState.ANONYMOUS
    assert storage.load() == {}


def test_initialize_with_token_only_is_anonymous(manager, storage):
    storage.path.write_text(json.dumps({"token": create_session_token(USER["id"])}))
    assert manager.initialize() is SessionState.ANONYMOUS


def test_initialize_with_corrupt_file_is_anonymous(manager, storage):
    storage.path.write_text("{not json")
    assert manager.initialize() is SessionState.ANONYMOUS


# ═══════════════════════════════════════════════════════════
# login() / logout()
# ═══════════════════════════════════════════════════════════


def test_login_persists_token_and_user_together(manager, storage, backend):
    session = manager.login("a@x.com", "secret1")

    assert manager.state is SessionState.AUTHENTICATED
    assert session.user.email == "a@x.com"
    assert storage.load() == {"token": backend.token, "user": USER}


def test_login_failure_surfaces_message_and_persists_nothing(manager, storage):
    with pytest.raises(ApiError) as exc:
        manager.login("a@x.com", "wrong")

    assert exc.value.message == "Invalid credentials"
    assert exc.value.code == "InvalidCredential"
    assert manager.state is SessionState.ANONYMOUS
    assert storage.load() == {}


def test_login_network_error(storage):
    def down(request):
        raise httpx.ConnectError("connection refused", request=request)

    m = SessionManager(storage, base_url="http://test/api", transport=httpx.MockTransport(down))
    with pytest.raises(ApiError) as exc:
        m.login("a@x.com", "secret1")
    assert exc.value.message == "Network error. Please check your connection."
    assert storage.load() == {}


def test_logout_is_local_and_clears_everything(manager, storage, backend):
    manager.login("a@x.com", "secret1")
    calls = _network_calls(backend)

    manager.logout()

    assert manager.state is SessionState.ANONYMOUS
    assert storage.load() == {}
    assert _network_calls(backend) == calls


def test_restored_after_login_by_a_new_manager(manager, storage, backend):
    manager.login("a@x.com", "secret1")

    fresh = SessionManager(storage, base_url="http://test/api", transport=httpx.MockTransport(backend))
    assert fresh.initialize() is SessionState.AUTHENTICATED
    assert fresh.session.user.id == USER["id"]
    fresh.close()


# ═══════════════════════════════════════════════════════════
# Interception
# ═══════════════════════════════════════════════════════════


def test_token_is_attached_to_requests(manager, backend):
    manager.login("a@x.com", "secret1")
    VoxAiClient(manager).send_message("hello")

    assert backend.requests[-1].headers["x-auth-token"] == backend.token


def test_no_token_header_when_anonymous(manager, backend):
    VoxAiClient(manager).list_schemes()
    assert "x-auth-token" not in backend.requests[-1].headers


def test_401_tears_down_session(manager, storage, backend):
    manager.login("a@x.com", "secret1")
    backend.reject_with_401 = True

    with pytest.raises(ApiError) as exc:
        VoxAiClient(manager).send_message("hello")

    assert exc.value.status_code == 401
    assert exc.value.code == "ExpiredToken"
    assert manager.state is SessionState.ANONYMOUS
    assert storage.load() == {}

    # A later start-up finds nothing either
    assert manager.initialize() is SessionState.ANONYMOUS


def test_non_401_errors_keep_session(manager, storage, backend):
    manager.login("a@x.com", "secret1")
    with pytest.raises(ApiError):
        manager.login("a@x.com", "wrong")
    assert manager.state is SessionState.AUTHENTICATED
    assert storage.token() == backend.token


# ═══════════════════════════════════════════════════════════
# Subscribers
# ═══════════════════════════════════════════════════════════


def test_subscribers_see_every_transition(manager, storage, backend):
    seen = []
    unsubscribe = manager.subscribe(seen.append)

    manager.login("a@x.com", "secret1")
    manager.logout()
    manager.logout()  # already anonymous, no event

    assert [s.user.name if s else None for s in seen] == ["Alice", None]

    unsubscribe()
    manager.login("a@x.com", "secret1")
    assert len(seen) == 2


# ═══════════════════════════════════════════════════════════
# VoxAiClient + error messages
# ═══════════════════════════════════════════════════════════


def test_register_does_not_log_in(manager, storage):
    msg = VoxAiClient(manager).register("Alice", "a@x.com", "secret1", ["health"])
    assert msg == "User registered successfully"
    assert manager.state is SessionState.ANONYMOUS
    assert storage.load() == {}


def test_format_error_message():
    request = httpx.Request("GET", "http://test/api/x")
    assert format_error_message(None) == "An unexpected error occurred."
    assert format_error_message(ApiError("boom")) == "boom"
    assert format_error_message(httpx.ConnectError("x", request=request)) == (
        "Network error. Please check your connection."
    )

    response = httpx.Response(400, json={"msg": "User already exists"}, request=request)
    err = httpx.HTTPStatusError("bad", request=request, response=response)
    assert format_error_message(err) == "User already exists"

    response = httpx.Response(422, json={"detail": [{"loc": ["body"]}]}, request=request)
    err = httpx.HTTPStatusError("bad", request=request, response=response)
    assert format_error_message(err) == "Please check your input and try again."

    assert format_error_message(ValueError("plain")) == "plain"
