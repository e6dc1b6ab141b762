"""Scheme API routes.

Learn: Listing is public. Creating a scheme needs a valid session
token; the dependency sits on the route rather than the router so
the two methods on the same path can differ.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from voxai.auth.dependencies import get_current_user
from voxai.db.engine import get_db
from voxai.schemas.scheme import SchemeCreate, SchemeRead
from voxai.services.scheme_service import SchemeService

router = APIRouter(prefix="/schemes")


def _svc(db: AsyncSession = Depends(get_db)) -> SchemeService:
    return SchemeService(db)


@router.get("", response_model=list[SchemeRead])
async def list_schemes(
    category: Optional[str] = None,
    svc: SchemeService = Depends(_svc),
):
    return await svc.list_schemes(category=category)


@router.post(
    "",
    response_model=SchemeRead,
    status_code=201,
    dependencies=[Depends(get_current_user)],
)
async def create_scheme(body: SchemeCreate, svc: SchemeService = Depends(_svc)):
    return await svc.create_scheme(
        title=body.title,
        description=body.description,
        category=body.category,
        url=body.url,
    )
