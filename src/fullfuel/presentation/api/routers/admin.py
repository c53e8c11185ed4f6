import logging

from fastapi import APIRouter

from fullfuel.presentation.api.dependencies import AdminUser, DBSession
from fullfuel.presentation.api.exception_handlers import translate_failures
from fullfuel.presentation.api.schemas.admin import UpdateRoleRequest, UserListResponse
from fullfuel.presentation.api.schemas.auth import CurrentUserResponse, UserResponse
from fullfuel_identity.application.commands import UpdateUserRoleCommand
from fullfuel_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/users",
    summary="List all users",
    responses={
        200: {"description": "List of all users"},
        403: {"description": "Admin access required"},
    },
)
async def list_users(
    _admin: AdminUser,  # Used for authorization check
    session: DBSession,
) -> UserListResponse:
    """List all users."""
    user_repo = UserRepositorySQLAlchemy(session)
    async with translate_failures("Error fetching users"):
        users = await user_repo.list_all()
    return UserListResponse(users=[UserResponse.from_user(u) for u in users])


@router.put(
    "/users/role",
    summary="Update user role",
    responses={
        200: {"description": "Role updated successfully"},
        400: {"description": "Invalid role or cannot demote yourself"},
        403: {"description": "Admin access required"},
        404: {"description": "User not found"},
    },
)
async def update_user_role(
    request: UpdateRoleRequest,
    admin: AdminUser,
    session: DBSession,
) -> CurrentUserResponse:
    """Update a user's role."""
    command = UpdateUserRoleCommand(user_repository=UserRepositorySQLAlchemy(session))

    async with translate_failures("Error updating user role", session):
        user = await command.execute(
            user_id=request.user_id,
            new_role=request.role.lower(),
            requesting_admin_id=admin.id,
        )
        await session.commit()

    logger.info("Admin %s set role of %s to %s", admin.email, user.id, user.role.value)
    return CurrentUserResponse(user=UserResponse.from_user(user))
