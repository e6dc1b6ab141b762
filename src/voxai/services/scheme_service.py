"""Scheme service: listing and creating government schemes."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voxai.db.models import Scheme
from voxai.errors import UnexpectedStoreFailure

SAMPLE_SCHEMES = [
    {
        "title": "PM Scholarship Scheme",
        "description": "Financial assistance for meritorious students.",
        "category": "Education",
    },
    {
        "title": "Startup India",
        "description": "Support and funding for new startups.",
        "category": "Entrepreneurship",
    },
]


class SchemeService:
    """Business logic for schemes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_schemes(self, category: Optional[str] = None) -> list[Scheme]:
        """Newest first, optionally filtered by category (case-insensitive)."""
        q = select(Scheme).order_by(Scheme.created_at.desc())
        try:
            result = await self.db.execute(q)
        except SQLAlchemyError as e:
            raise UnexpectedStoreFailure() from e
        schemes = list(result.scalars().all())
        if category:
            wanted = category.lower()
            schemes = [s for s in schemes if (s.category or "").lower() == wanted]
        return schemes

    async def create_scheme(
        self,
        title: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        url: Optional[str] = None,
    ) -> Scheme:
        scheme = Scheme(title=title, description=description, category=category, url=url)
        self.db.add(scheme)
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UnexpectedStoreFailure() from e
        return scheme

    async def reseed(self, schemes: Optional[list[dict]] = None) -> int:
        """Replace every scheme with ``schemes`` (the samples by default).

        Returns the number inserted.
        """
        if schemes is None:
            schemes = SAMPLE_SCHEMES
        try:
            await self.db.execute(delete(Scheme))
            self.db.add_all([Scheme(**data) for data in schemes])
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise UnexpectedStoreFailure() from e
        return len(schemes)
