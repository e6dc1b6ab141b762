"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter where a whole router is protected. Health and
auth routers are open; schemes protects only its POST route.
"""

from fastapi import APIRouter, Depends

from voxai.api.auth import router as auth_router
from voxai.api.chat import router as chat_router
from voxai.api.health import router as health_router
from voxai.api.schemes import router as schemes_router
from voxai.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(schemes_router, tags=["schemes"])

# Protected routes: require a valid x-auth-token
api_router.include_router(chat_router, tags=["chat"], dependencies=_auth)
