"""Admin schemas for user management."""

from uuid import UUID

from fullfuel.presentation.api.schemas.auth import CamelModel, UserResponse


class UpdateRoleRequest(CamelModel):
    """Request schema for changing a user's role."""

    user_id: UUID
    role: str


class UserListResponse(CamelModel):
    """Response schema listing all users."""

    users: list[UserResponse]
