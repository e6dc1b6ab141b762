"""FastAPI application factory.

Learn: App factory pattern: create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (table creation, engine
disposal). Middleware, CORS, error handlers and routers are all
registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from voxai import __version__
from voxai.api import api_router
from voxai.config import settings
from voxai.errors import UnexpectedStoreFailure, VoxAiError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    from voxai.db.engine import engine, init_models

    logger.info(
        "voxai.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    await init_models(engine)

    yield

    logger.info("voxai.shutdown")
    await engine.dispose()


async def voxai_error_handler(request: Request, exc: VoxAiError) -> JSONResponse:
    """Render domain errors as {"msg", "code"} with the error's status."""
    if exc.status_code >= 500:
        logger.error("http.unexpected_error", code=exc.code, error=repr(exc.__cause__ or exc))
    headers = {"WWW-Authenticate": "x-auth-token"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"msg": exc.message, "code": exc.code},
        headers=headers,
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database errors that escaped a service render as UnexpectedStoreFailure."""
    failure = UnexpectedStoreFailure()
    failure.__cause__ = exc
    return await voxai_error_handler(request, failure)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("http.unhandled_error", path=request.url.path, error=repr(exc))
    return JSONResponse(status_code=500, content={"msg": "Internal server error"})


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes get a friendly message; other HTTP errors pass through."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={"msg": "Route not found. Please check the API endpoint."},
        )
    return await http_exception_handler(request, exc)


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="VoxAi",
        description="Government scheme discovery with a keyword chatbot",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestContext → CORS → handler

    from voxai.middleware.request_context import RequestContextMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(VoxAiError, voxai_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    @app.get("/")
    async def root():
        return {"message": "VoxAi backend running", "version": __version__, "status": "active"}

    return app


# Default app instance (used by uvicorn: voxai.main:app)
app = create_app()
