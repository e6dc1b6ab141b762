"""Auth API: registration, login, and the current user.

Learn: Routes for the credential lifecycle:
- POST /auth/register → create a user (no token; log in afterwards)
- POST /auth/login → email/password → session token + user projection
- GET /auth/me → the caller's own record (protected)

Errors are raised as VoxAiError subclasses by the service layer and
rendered by the app-wide handler in main.py.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from voxai.auth.dependencies import CurrentIdentity, get_current_user
from voxai.db.engine import get_db
from voxai.errors import NotFound
from voxai.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    UserPublic,
    UserRead,
)
from voxai.services.auth_service import AuthService
from voxai.services.credential_store import CredentialStore

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=MessageResponse)
async def register(body: RegisterRequest, svc: AuthService = Depends(_svc)):
    """Create a new user account."""
    await svc.register(
        name=body.name,
        email=body.email,
        password=body.password,
        interests=body.interests,
    )
    return MessageResponse(msg="User registered successfully")


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_svc)):
    """Login with email and password → session token."""
    result = await svc.login(email=body.email, password=body.password)
    return LoginResponse(token=result.token, user=UserPublic.model_validate(result.user))


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's info."""
    user = await CredentialStore(db).get(uuid.UUID(identity.user_id))
    if not user:
        raise NotFound("User not found")
    return user
