"""Pydantic schemas for API requests and responses."""

from fullfuel.presentation.api.schemas.admin import UpdateRoleRequest, UserListResponse
from fullfuel.presentation.api.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    GoogleTokenRequest,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from fullfuel.presentation.api.schemas.users import UpdateProfileRequest

__all__ = [
    "AuthResponse",
    "CurrentUserResponse",
    "GoogleTokenRequest",
    "LoginRequest",
    "RegisterRequest",
    "UpdateProfileRequest",
    "UpdateRoleRequest",
    "UserListResponse",
    "UserResponse",
]
