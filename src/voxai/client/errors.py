"""Client-side errors and user-facing messages."""

from typing import Optional

import httpx

NETWORK_ERROR = "Network error. Please check your connection."
VALIDATION_ERROR = "Please check your input and try again."
GENERIC_ERROR = "An unexpected error occurred."
SERVER_ERROR = "Server error occurred"


class ApiError(Exception):
    """A failed call to the backend, carrying a message fit for the user."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        body = _json_body(response)
        return cls(
            message_from_body(body),
            code=body.get("code"),
            status_code=response.status_code,
        )


def _json_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def message_from_body(body: dict) -> str:
    """Pick the server's message out of an error body."""
    for key in ("msg", "message"):
        if isinstance(body.get(key), str) and body[key]:
            return body[key]
    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list):
        # FastAPI request validation errors
        return VALIDATION_ERROR
    return SERVER_ERROR


def format_error_message(error: Optional[BaseException]) -> str:
    """Turn any error from a backend call into a user-facing message."""
    if error is None:
        return GENERIC_ERROR
    if isinstance(error, ApiError):
        return error.message
    if isinstance(error, httpx.HTTPStatusError):
        return message_from_body(_json_body(error.response))
    if isinstance(error, httpx.RequestError):
        return NETWORK_ERROR
    return str(error) or GENERIC_ERROR
