"""Credential issuer: registration and login.

Learn: Registration only creates the account; the caller must log in
afterwards to get a token. bcrypt is CPU-bound, so hashing and
verification run in a worker thread via asyncio.to_thread() to keep
the event loop free for unrelated requests.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from voxai.auth.jwt import create_session_token
from voxai.auth.password import hash_password, verify_password
from voxai.db.models import User
from voxai.errors import DuplicateIdentity, IdentityNotFound, InvalidCredential
from voxai.services.credential_store import CredentialStore

logger = structlog.get_logger()


@dataclass
class LoginResult:
    token: str
    user: User


class AuthService:
    """Business logic for issuing credentials."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = CredentialStore(db)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        interests: Optional[list[str]] = None,
    ) -> User:
        if await self.store.get_by_email(email):
            logger.info("auth.register_rejected", reason=DuplicateIdentity.code)
            raise DuplicateIdentity()

        password_hash = await asyncio.to_thread(hash_password, password)
        try:
            user = await self.store.add(
                name=name,
                email=email,
                password_hash=password_hash,
                interests=interests,
            )
        except DuplicateIdentity:
            # Lost a race with a concurrent registration for the same email.
            logger.info("auth.register_rejected", reason=DuplicateIdentity.code)
            raise

        logger.info("auth.registered", user_id=str(user.id))
        return user

    async def login(self, email: str, password: str) -> LoginResult:
        user = await self.store.get_by_email(email)
        if not user:
            logger.info("auth.login_failed", reason=IdentityNotFound.code)
            raise IdentityNotFound()

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", reason=InvalidCredential.code, user_id=str(user.id))
            raise InvalidCredential()

        token = create_session_token(str(user.id))
        logger.info("auth.login", user_id=str(user.id))
        return LoginResult(token=token, user=user)
