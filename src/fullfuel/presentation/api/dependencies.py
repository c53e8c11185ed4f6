"""Request dependencies: sessions, services, the current user and the admin gate.

Routes declare what they need through the ``Annotated`` aliases defined
here (``DBSession``, ``AuthService``, ``CurrentUser``, ``AdminUser``).
"""

import logging
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fullfuel.presentation.api.config import get_api_settings
from fullfuel.presentation.api.exception_handlers import translate_failures
from fullfuel_auth import (
    FallbackIdentityVerifier,
    GoogleIdTokenVerifier,
    IdentityVerifier,
    JWTService,
    PasswordHashingService,
    UnverifiedIdTokenParser,
)
from fullfuel_config.settings import Settings
from fullfuel_identity import AuthenticationService, User
from fullfuel_identity.infrastructure.persistence.sqlalchemy import (
    IdentityBase,
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

AUTH_SERVER_ERROR = "Server error during authentication"


# -----------------------------------------------------------------------------
# Engine, sessions and the identity verifier
#
# Built once per application from the Settings passed to create_app and kept
# on app.state; the request dependencies below read them from there.
# -----------------------------------------------------------------------------


def build_engine(settings: Settings) -> AsyncEngine:
    """Pooled engine for ``settings.database_url``.

    The parent folder of a SQLite database file is created if missing.
    """
    url = settings.database_url
    if url.startswith("sqlite") and ":memory:" not in url:
        Path(url.split("///")[-1]).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(url, echo=False, pool_pre_ping=True)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


def build_identity_verifier(settings: Settings) -> IdentityVerifier:
    """
    Google ID token verifier for ``settings``.

    The verifier caches Google's signing keys, so one instance serves all
    requests. When the unverified fallback is enabled, tokens the real
    verifier rejects are decoded without a signature check.
    """
    primary = GoogleIdTokenVerifier(
        client_id=settings.google_client_id,
        jwks_url=settings.google_jwks_url,
        timeout=settings.google_verify_timeout_seconds,
        cache_seconds=settings.google_jwks_cache_seconds,
        refresh_interval=settings.google_jwks_refresh_seconds,
    )

    if not settings.google_allow_unverified_fallback:
        return FallbackIdentityVerifier(primary)

    logger.warning(
        "Unverified Google token fallback is enabled "
        "(set GOOGLE_ALLOW_UNVERIFIED_FALLBACK=false to disable)",
    )
    return FallbackIdentityVerifier(primary, UnverifiedIdTokenParser())


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    Routes commit explicitly; anything left uncommitted is discarded when
    the session closes.

    Yields
    ------
    AsyncSession bound to the application's engine
    """
    async with request.app.state.session_maker() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


async def create_tables(engine: AsyncEngine) -> None:
    """Create the tables that do not exist yet; existing ones are left alone."""
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)

    logger.info("Database tables ready")


# -----------------------------------------------------------------------------
# Authentication Services
# -----------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


def get_jwt_service(settings: SettingsDep) -> JWTService:
    """Session token codec using the configured secret and lifetime."""
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        token_expire_days=settings.jwt_token_expire_days,
    )


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    return PasswordHashingService(rounds=settings.password_bcrypt_rounds)


async def get_authentication_service(
    session: DBSession,
    settings: SettingsDep,
    jwt_service: JWTService = Depends(get_jwt_service),
    password_service: PasswordHashingService = Depends(get_password_service),
    identity_verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AuthenticationService:
    """
    Auth service wired to the request session.

    This service orchestrates registration, login, Google sign-in and
    resolving the user behind a session token.
    """
    return AuthenticationService(
        user_repository=UserRepositorySQLAlchemy(session),
        password_service=password_service,
        jwt_service=jwt_service,
        identity_verifier=identity_verifier,
        store_timeout=settings.store_timeout_seconds,
    )


AuthService = Annotated[AuthenticationService, Depends(get_authentication_service)]

# Raw Authorization header; parsing happens in the service
AuthorizationHeader = Annotated[str | None, Header(alias="Authorization")]


# -----------------------------------------------------------------------------
# Current User (Bearer Authentication)
# -----------------------------------------------------------------------------


async def get_current_user(
    auth_service: AuthService,
    authorization: AuthorizationHeader = None,
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Raises
    ------
    MissingTokenError
        401 if the header is absent or not a bearer header
    InvalidTokenError
        401 if the token is invalid or expired
    UserNotFoundError
        404 if the token's user no longer exists
    """
    async with translate_failures(AUTH_SERVER_ERROR):
        return await auth_service.current_user(authorization)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(
    auth_service: AuthService,
    authorization: AuthorizationHeader = None,
) -> User:
    """Require admin user (403 otherwise)."""
    async with translate_failures(AUTH_SERVER_ERROR):
        return await auth_service.require_admin(authorization)


AdminUser = Annotated[User, Depends(require_admin)]
