"""Credential store: persistence contract for User records.

Learn: The store owns no logic beyond lookup and unique-constrained
insert. Uniqueness of email is enforced by the table constraint, so
two racing registrations can never both land; the loser surfaces as
DuplicateIdentity instead of a raw IntegrityError.
"""

import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voxai.db.models import User
from voxai.errors import DuplicateIdentity, UnexpectedStoreFailure


class CredentialStore:
    """Lookup and insert of users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        try:
            return await self.db.get(User, user_id)
        except SQLAlchemyError as e:
            raise UnexpectedStoreFailure() from e

    async def get_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self.db.execute(select(User).where(User.email == email))
        except SQLAlchemyError as e:
            raise UnexpectedStoreFailure() from e
        return result.scalars().first()

    async def count(self) -> int:
        try:
            result = await self.db.execute(select(func.count()).select_from(User))
        except SQLAlchemyError as e:
            raise UnexpectedStoreFailure() from e
        return result.scalar_one()

    async def add(
        self,
        name: str,
        email: str,
        password_hash: str,
        interests: Optional[list[str]] = None,
    ) -> User:
        """Insert and commit a new user. Exactly one row or none."""
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            interests=list(interests or []),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateIdentity() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UnexpectedStoreFailure() from e
        # id and created_at are filled in client-side at flush; no reload needed.
        return user
