"""Client runtime for the VoxAi API.

Learn: The SessionManager is the single owner of the local session.
It persists the token and user projection together, restores them on
startup, attaches the token to every request and tears the session
down when the backend rejects it. VoxAiClient and the CLI receive the
manager explicitly; there is no module-level session.
"""

from voxai.client.api import VoxAiClient
from voxai.client.errors import ApiError, format_error_message
from voxai.client.session import Session, SessionManager, SessionState, SessionUser
from voxai.client.storage import SessionStorage

__all__ = [
    "ApiError",
    "Session",
    "SessionManager",
    "SessionState",
    "SessionStorage",
    "SessionUser",
    "VoxAiClient",
    "format_error_message",
]
