"""VoxAiClient: typed calls to the backend over the session's HTTP client.

Every call goes through SessionManager.http, so the token header and
the 401 teardown apply to all of them.
"""

from typing import Optional

import httpx

from voxai.client.errors import NETWORK_ERROR, ApiError
from voxai.client.session import Session, SessionManager


class VoxAiClient:
    def __init__(self, session: SessionManager):
        self.session = session

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self.session.http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise ApiError(NETWORK_ERROR, code="NetworkError") from e
        if response.is_error:
            raise ApiError.from_response(response)
        return response

    # ─── Auth ───────────────────────────────────────────

    def register(
        self,
        name: str,
        email: str,
        password: str,
        interests: Optional[list[str]] = None,
    ) -> str:
        """Create an account. Returns the server message; does not log in."""
        r = self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password, "interests": interests or []},
        )
        return r.json()["msg"]

    def login(self, email: str, password: str) -> Session:
        return self.session.login(email, password)

    def logout(self) -> None:
        self.session.logout()

    def me(self) -> dict:
        return self._request("GET", "/auth/me").json()

    # ─── Schemes ────────────────────────────────────────

    def list_schemes(self, category: Optional[str] = None) -> list[dict]:
        params = {"category": category} if category else None
        return self._request("GET", "/schemes", params=params).json()

    def create_scheme(
        self,
        title: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        url: Optional[str] = None,
    ) -> dict:
        body = {"title": title, "description": description, "category": category, "url": url}
        return self._request("POST", "/schemes", json=body).json()

    # ─── Chat ───────────────────────────────────────────

    def send_message(self, message: str) -> dict:
        return self._request("POST", "/chat", json={"message": message}).json()
