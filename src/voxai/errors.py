"""Domain errors shared by the service layer and the HTTP layer.

Each error knows its HTTP status and a stable ``code`` string. The app
registers one exception handler (see main.py) that renders any
VoxAiError as ``{"msg": ..., "code": ...}``.
"""

from typing import Optional


class VoxAiError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    code = "VoxAiError"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ─── Credential issuance (400) ──────────────────────────


class DuplicateIdentity(VoxAiError):
    status_code = 400
    code = "DuplicateIdentity"
    default_message = "User already exists"


class IdentityNotFound(VoxAiError):
    status_code = 400
    code = "IdentityNotFound"
    default_message = "User not found"


class InvalidCredential(VoxAiError):
    status_code = 400
    code = "InvalidCredential"
    default_message = "Invalid credentials"


# ─── Session tokens (401) ───────────────────────────────


class TokenError(VoxAiError):
    """Raised when an incoming session token is rejected."""

    status_code = 401
    code = "TokenError"
    default_message = "Not authorized"


class MissingToken(TokenError):
    code = "MissingToken"
    default_message = "No token, authorization denied"


class InvalidToken(TokenError):
    code = "InvalidToken"
    default_message = "Token is not valid"


class ExpiredToken(TokenError):
    code = "ExpiredToken"
    default_message = "Token has expired"


# ─── Store (500) ────────────────────────────────────────


class UnexpectedStoreFailure(VoxAiError):
    status_code = 500
    code = "UnexpectedStoreFailure"
    default_message = "Database error, please try again"


# ─── Requests (400) ─────────────────────────────────────


class InvalidRequest(VoxAiError):
    status_code = 400
    code = "InvalidRequest"
    default_message = "Please check your input and try again"


# ─── Lookups (404) ──────────────────────────────────────


class NotFound(VoxAiError):
    status_code = 404
    code = "NotFound"
    default_message = "The requested resource was not found"
