"""Client session manager.

Learn: A two-state machine, Anonymous ⇄ Authenticated.

    Anonymous → Authenticated   login() succeeds, or initialize() finds
                                a stored token that has not expired
    Authenticated → Anonymous   logout(), an expired/undecodable token at
                                initialize(), or any 401 seen by the
                                response hook

Nothing else changes the state. Every change is published to the
callbacks registered with subscribe(). Expiry is checked locally by
decoding the token's ``exp`` claim; the signature is only verified by
the server.
"""

import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

import httpx
import structlog

from voxai.auth.jwt import token_expiry
from voxai.client.errors import NETWORK_ERROR, ApiError
from voxai.client.storage import SessionStorage
from voxai.errors import InvalidToken

logger = structlog.get_logger()

TOKEN_HEADER = "x-auth-token"


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionUser:
    """The public user projection returned by login."""
    id: str
    name: str
    email: str

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        return cls(id=str(data["id"]), name=data.get("name", ""), email=data["email"])

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Session:
    token: str
    user: SessionUser
    expires_at: datetime


Listener = Callable[[Optional[Session]], None]


class SessionManager:
    """Owns the persisted token, the active session, and the HTTP hooks."""

    def __init__(
        self,
        storage: SessionStorage,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._session: Optional[Session] = None
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()
        self.http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
            event_hooks={
                "request": [self._attach_token],
                "response": [self._inspect_response],
            },
        )

    # ─── State ──────────────────────────────────────────

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.ANONYMOUS
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for session changes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, session: Optional[Session]) -> None:
        changed = session != self._session
        self._session = session
        if changed:
            for listener in list(self._listeners):
                listener(session)

    # ─── Lifecycle ──────────────────────────────────────

    def initialize(self) -> SessionState:
        """Restore a stored session without contacting the server."""
        with self._lock:
            stored = self.storage.load()
            token, user = stored.get("token"), stored.get("user")
            if not (token and isinstance(user, dict)):
                self._publish(None)
                return self.state

            try:
                expires_at = token_expiry(token)
                session = Session(token=token, user=SessionUser.from_dict(user), expires_at=expires_at)
            except (InvalidToken, KeyError, TypeError) as e:
                logger.warning("session.restore_failed", error=str(e))
                self._teardown()
                return self.state

            # A token is still valid at the exact second of its exp claim.
            if expires_at < self._clock():
                logger.info("session.expired", expires_at=expires_at.isoformat())
                self._teardown()
                return self.state

            self._publish(session)
            logger.info("session.restored", user_id=session.user.id)
            return self.state

    def login(self, email: str, password: str) -> Session:
        """Exchange credentials for a token and make it the active session.

        Raises ApiError with a user-facing message on failure; nothing is
        persisted in that case.
        """
        try:
            response = self.http.post("/auth/login", json={"email": email, "password": password})
        except httpx.RequestError as e:
            raise ApiError(NETWORK_ERROR, code="NetworkError") from e
        if response.is_error:
            raise ApiError.from_response(response)

        body = response.json()
        token = body["token"]
        session = Session(
            token=token,
            user=SessionUser.from_dict(body["user"]),
            expires_at=token_expiry(token),
        )
        with self._lock:
            self.storage.save(session.token, session.user.to_dict())
            self._publish(session)
        logger.info("session.login", user_id=session.user.id)
        return session

    def logout(self) -> None:
        """Drop the session locally. No network call."""
        with self._lock:
            self._teardown()
        logger.info("session.logout")

    def _teardown(self) -> None:
        self.storage.clear()
        self._publish(None)

    # ─── HTTP hooks ─────────────────────────────────────

    def _attach_token(self, request: httpx.Request) -> None:
        token = self.storage.token()
        if token:
            request.headers[TOKEN_HEADER] = token

    def _inspect_response(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            with self._lock:
                self._teardown()
            logger.info("session.rejected", path=response.request.url.path)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
