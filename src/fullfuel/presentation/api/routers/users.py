"""Profile router for the signed-in user."""

import logging

from fastapi import APIRouter

from fullfuel.presentation.api.dependencies import CurrentUser, DBSession
from fullfuel.presentation.api.exception_handlers import translate_failures
from fullfuel.presentation.api.schemas.auth import CurrentUserResponse, UserResponse
from fullfuel.presentation.api.schemas.users import UpdateProfileRequest
from fullfuel_identity.application.commands import UpdateProfileCommand
from fullfuel_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Profile"])


@router.get("/profile", summary="Get own profile")
async def get_profile(user: CurrentUser) -> CurrentUserResponse:
    return CurrentUserResponse(user=UserResponse.from_user(user))


@router.put(
    "/profile",
    summary="Update own profile",
    responses={
        200: {"description": "Profile updated"},
        400: {"description": "Username already taken"},
        401: {"description": "Missing or invalid token"},
    },
)
async def update_profile(
    request: UpdateProfileRequest,
    user: CurrentUser,
    session: DBSession,
) -> CurrentUserResponse:
    """Update name, username, bio, picture or favorite artists."""
    command = UpdateProfileCommand(user_repository=UserRepositorySQLAlchemy(session))

    async with translate_failures("Error updating profile", session):
        updated = await command.execute(
            user=user,
            name=request.name,
            username=request.username,
            bio=request.bio,
            profile_picture=request.profile_picture,
            favorite_artists=request.favorite_artists,
        )
        await session.commit()

    return CurrentUserResponse(user=UserResponse.from_user(updated))
