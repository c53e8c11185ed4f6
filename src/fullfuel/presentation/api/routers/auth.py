"""Authentication router for registration, login and Google sign-in."""

import logging

from fastapi import APIRouter

from fullfuel.presentation.api.dependencies import (
    AUTH_SERVER_ERROR,
    AuthorizationHeader,
    AuthService,
    DBSession,
)
from fullfuel.presentation.api.exception_handlers import translate_failures
from fullfuel.presentation.api.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    GoogleTokenRequest,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from fullfuel_identity import AuthResult

logger = logging.getLogger(__name__)

router = APIRouter()


def _create_auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        token=result.token,
        user=UserResponse.from_user(result.user),
    )


@router.post(
    "/register",
    summary="Register a new user",
    responses={
        200: {"description": "User registered successfully"},
        400: {"description": "Missing fields, weak password or duplicate user"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """Register with name, email and password; returns a session token."""
    async with translate_failures("Error creating user", session):
        result = await auth_service.register(
            name=request.name,
            email=request.email,
            password=request.password,
            username=request.username,
        )
        await session.commit()

    return _create_auth_response(result)


@router.post(
    "/login",
    summary="Authenticate user",
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Missing fields or account without a password"},
        401: {"description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """Authenticate with email and password."""
    async with translate_failures("Error logging in", session):
        result = await auth_service.login(
            email=request.email,
            password=request.password,
        )

    return _create_auth_response(result)


@router.get(
    "/me",
    summary="Get current user",
    responses={
        200: {"description": "The authenticated user"},
        401: {"description": "Missing or invalid token"},
        404: {"description": "User not found"},
    },
)
async def get_me(
    auth_service: AuthService,
    authorization: AuthorizationHeader = None,
) -> CurrentUserResponse:
    """Return the user behind the bearer token."""
    async with translate_failures(AUTH_SERVER_ERROR):
        user = await auth_service.current_user(authorization)

    return CurrentUserResponse(user=UserResponse.from_user(user))


@router.post(
    "/google-login",
    summary="Sign in with Google",
    responses={
        200: {"description": "Login successful (account created on first use)"},
        400: {"description": "Missing or unusable Google token"},
        504: {"description": "Google or the database did not answer in time"},
    },
)
async def google_login(
    request: GoogleTokenRequest,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """Sign in with a Google ID token, creating the account if needed."""
    async with translate_failures("Error with Google login", session):
        result = await auth_service.external_login(request.token)
        await session.commit()

    return _create_auth_response(result)


@router.post(
    "/register/google",
    summary="Register with Google",
    responses={
        200: {"description": "User registered successfully"},
        400: {"description": "Missing or unusable Google token, or duplicate user"},
        504: {"description": "Google or the database did not answer in time"},
    },
)
async def google_register(
    request: GoogleTokenRequest,
    auth_service: AuthService,
    session: DBSession,
) -> AuthResponse:
    """Register a new account from a Google ID token."""
    async with translate_failures("Error with Google registration", session):
        result = await auth_service.external_register(request.token)
        await session.commit()

    return _create_auth_response(result)
