"""Application factory for the Full Fuel HTTP API.

Routes live under ``/api``; the health check and the info document are
served at ``/health`` and ``/``.
"""

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fullfuel.presentation.api.config import get_api_settings
from fullfuel.presentation.api.dependencies import (
    build_engine,
    build_identity_verifier,
    build_session_maker,
    create_tables,
)
from fullfuel.presentation.api.exception_handlers import setup_exception_handlers
from fullfuel.presentation.api.routers import admin_router, auth_router, users_router
from fullfuel_config.settings import Settings


@lru_cache(maxsize=1)
def _configure_logging(log_level_str: str) -> None:
    """Send log records to stdout in one format at ``log_level_str``.

    Runs once per level; third-party chatter is held at WARNING.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    log_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in ("fullfuel", "fullfuel_auth", "fullfuel_identity"):
        logging.getLogger(name).setLevel(log_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
API_PREFIX = "/api"

OPENAPI_TAGS = [
    {
        "name": "Authentication",
        "description": """Registration, login and session tokens.

**Methods:**
- Email and password
- Google sign-in (ID token issued for our OAuth client)

**Security:**
- Passwords are hashed with bcrypt
- Session tokens are signed JWTs valid for 7 days
""",
    },
    {
        "name": "Profile",
        "description": "Read and edit the signed-in user's profile.",
    },
    {
        "name": "Admin",
        "description": "User management for administrators.",
    },
    {
        "name": "Health",
        "description": "Service health monitoring endpoints.",
    },
    {
        "name": "Info",
        "description": "API information and discovery.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create missing tables on startup; release the verifier and pool on shutdown."""
    logger.info("Starting Full Fuel API v%s...", API_VERSION)
    engine = app.state.engine
    try:
        await create_tables(engine)
    except (ConnectionRefusedError, OSError):
        logger.critical("Could not connect to the database.")
        raise SystemExit(1) from None
    yield

    logger.info("Shutting down Full Fuel API...")
    await app.state.identity_verifier.close()
    await engine.dispose()
    logger.info("Database connections closed")


def create_api_router() -> APIRouter:
    """Router holding every /api endpoint."""
    api_router = APIRouter()
    api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
    api_router.include_router(users_router)
    api_router.include_router(admin_router)
    return api_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings
        Settings to use instead of the environment (tests pass their own).

    Returns
    -------
    The application, ready to hand to an ASGI server.
    """
    if settings is None:
        settings = get_api_settings()

    _configure_logging(settings.log_level)

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Authentication and user management for **Full Fuel TV**.",
        version=API_VERSION,
        docs_url="/docs" if settings.api_debug else None,
        redoc_url="/redoc" if settings.api_debug else None,
        openapi_url="/openapi.json" if settings.api_debug else None,
        lifespan=lifespan,
        openapi_tags=OPENAPI_TAGS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    app.state.identity_verifier = build_identity_verifier(settings)

    setup_exception_handlers(app)

    app.include_router(create_api_router(), prefix=API_PREFIX)

    # Dependencies read settings through get_api_settings
    app.dependency_overrides[get_api_settings] = lambda: settings

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": API_VERSION,
        }

    @app.get("/", tags=["Info"])
    async def root() -> dict:
        """Name, version and entry points of the API."""
        return {
            "name": f"{settings.app_name} API",
            "version": API_VERSION,
            "docs": "/docs" if settings.api_debug else None,
            "api_base": API_PREFIX,
            "endpoints": {
                "health": "/health",
                "auth": f"{API_PREFIX}/auth",
                "profile": f"{API_PREFIX}/user/profile",
                "admin": f"{API_PREFIX}/admin",
            },
        }

    return app
