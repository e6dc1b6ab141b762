"""Pydantic schemas for registration, login, and the user projection.

Learn: The server only requires email and password to be present and
non-empty. Stricter checks (email format, password length) are
courtesy checks done by the client before it sends anything.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

# Matches the users.email column width.
EMAIL_MAX_LENGTH = 255


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LENGTH)
    password: str = Field(..., min_length=1)
    interests: list[str] = Field(default_factory=list)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    msg: str


class UserPublic(BaseModel):
    """Public-safe projection of a user. Never includes the hash."""
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class UserRead(UserPublic):
    interests: list[str] = []
    created_at: datetime


class LoginResponse(BaseModel):
    token: str
    user: UserPublic
